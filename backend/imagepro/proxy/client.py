"""Outbound HTTP shared by the proxy routes: credential check, upload gate, single-attempt POST."""
import logging
from typing import AsyncIterator, Optional

import httpx
from fastapi import UploadFile

from imagepro import config
from imagepro.compression.models import SourceImage
from imagepro.errors import ConfigurationError, ExternalServiceError, TransportError, ValidationError

logger = logging.getLogger("imagepro.proxy")


async def get_http_client() -> AsyncIterator[httpx.AsyncClient]:
    """One client per inbound request; nothing is shared across requests."""
    async with httpx.AsyncClient(timeout=config.UPSTREAM_TIMEOUT) as client:
        yield client


def require_credential(value: Optional[str], name: str) -> str:
    if not value:
        logger.error("Credential %s is not configured", name)
        raise ConfigurationError(f"Server is missing {name} configuration")
    return value


async def read_upload(file: Optional[UploadFile]) -> SourceImage:
    """Read an uploaded image through the validation gate. Raises ValidationError."""
    if file is None:
        raise ValidationError("Please upload an image file")
    max_bytes = config.MAX_IMAGE_SIZE_BYTES
    chunks: list[bytes] = []
    total = 0
    while chunk := await file.read(1024 * 1024):
        total += len(chunk)
        if total > max_bytes:
            raise ValidationError(f"Image must be smaller than {config.MAX_IMAGE_SIZE_MB}MB")
        chunks.append(chunk)
    return SourceImage.from_upload(file.filename, file.content_type, b"".join(chunks))


async def post(client: httpx.AsyncClient, url: str, *, fallback: str, **kwargs) -> httpx.Response:
    """POST once to an external API. Non-2xx raises ExternalServiceError, transport failures TransportError."""
    try:
        response = await client.post(url, **kwargs)
    except httpx.HTTPError as e:
        logger.exception("Request to %s failed: %s", url, e)
        raise TransportError(str(e) or None) from e
    except Exception as e:
        # Request construction failures, e.g. a non-ASCII credential or a malformed endpoint.
        logger.exception("Request to %s could not be sent: %s", url, e)
        raise TransportError(str(e) or None) from e
    if not response.is_success:
        logger.warning("%s returned %s", url, response.status_code)
        raise ExternalServiceError(response.status_code, response.content, fallback=fallback)
    return response
