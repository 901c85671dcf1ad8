"""Source and result models for image compression."""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from imagepro import config
from imagepro.errors import ValidationError

# Output media type -> Pillow format name
CODECS = {
    "image/jpeg": "JPEG",
    "image/png": "PNG",
    "image/webp": "WEBP",
}
LOSSLESS_MEDIA_TYPES = {"image/png"}


@dataclass(frozen=True)
class SourceImage:
    """Validated image payload supplied by the user. Build with ``from_upload``."""

    filename: str
    media_type: str
    payload: bytes = field(repr=False)

    @property
    def size(self) -> int:
        return len(self.payload)

    @classmethod
    def from_upload(cls, filename: Optional[str], media_type: Optional[str], payload: bytes) -> "SourceImage":
        media_type = (media_type or "").split(";")[0].strip().lower()
        if media_type not in config.ALLOWED_MEDIA_TYPES:
            raise ValidationError("Only JPG / PNG / WebP images are supported")
        if len(payload) > config.MAX_IMAGE_SIZE_BYTES:
            raise ValidationError(f"Image must be smaller than {config.MAX_IMAGE_SIZE_MB}MB")
        return cls(filename=filename or "image", media_type=media_type, payload=payload)


@dataclass(frozen=True)
class EncodedResult:
    payload: bytes = field(repr=False)
    media_type: str
    width: int
    height: int

    @property
    def size(self) -> int:
        return len(self.payload)

    @property
    def extension(self) -> str:
        return self.media_type.split("/")[1]

    def download_name(self, original_filename: str) -> str:
        stem = Path(original_filename).stem or "image"
        return f"compressed-{stem}.{self.extension}"

    def saved_percent(self, original_size: int) -> float:
        """Share of the original size saved, floored at 0."""
        if original_size <= 0:
            return 0.0
        return round(max(0.0, 100.0 - self.size / original_size * 100.0), 1)
