from .client import get_http_client, read_upload, require_credential
from .generation import GeneratedImage, GenerationRequest, extract_generated_image, generate
from .recognition import extract_summary, parse_message_content, recognize
from .removal import RemovedBackground, remove_background

__all__ = [
    "GeneratedImage",
    "GenerationRequest",
    "RemovedBackground",
    "extract_generated_image",
    "extract_summary",
    "generate",
    "get_http_client",
    "parse_message_content",
    "read_upload",
    "recognize",
    "remove_background",
    "require_credential",
]
