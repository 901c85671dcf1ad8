"""Background removal through the remove.bg API."""
import logging
from dataclasses import dataclass, field
from pathlib import Path

import httpx

from imagepro import config
from imagepro.compression.models import SourceImage
from imagepro.proxy.client import post

logger = logging.getLogger("imagepro.proxy.removal")

REMOVAL_FAILED = "Background removal service call failed"


@dataclass(frozen=True)
class RemovedBackground:
    payload: bytes = field(repr=False)
    media_type: str = "image/png"

    @property
    def size(self) -> int:
        return len(self.payload)

    @staticmethod
    def download_name(original_filename: str) -> str:
        stem = Path(original_filename).stem or "image"
        return f"{stem}-no-bg.png"


async def remove_background(
    client: httpx.AsyncClient,
    source: SourceImage,
    size: str,
    api_key: str,
) -> RemovedBackground:
    logger.info("Removing background from %s (%s bytes, size=%s)", source.filename, source.size, size)
    response = await post(
        client,
        config.REMOVE_BG_ENDPOINT,
        fallback=REMOVAL_FAILED,
        headers={"X-Api-Key": api_key},
        data={"size": size},
        files={"image_file": (source.filename or "upload.png", source.payload, source.media_type)},
    )
    return RemovedBackground(
        payload=response.content,
        media_type=response.headers.get("content-type") or "image/png",
    )
