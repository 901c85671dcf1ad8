from .models import EncodedResult, SourceImage
from .service import compress, output_media_type, quality_from_percent

__all__ = ["EncodedResult", "SourceImage", "compress", "output_media_type", "quality_from_percent"]
