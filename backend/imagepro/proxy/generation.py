"""Text-to-image generation through the Ark images API."""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

import httpx

from imagepro import config
from imagepro.errors import ImageProError, ValidationError
from imagepro.proxy.client import post

logger = logging.getLogger("imagepro.proxy.generation")

GENERATION_FAILED = "Generation failed"


@dataclass(frozen=True)
class GenerationRequest:
    prompt: str
    size: str = config.DEFAULT_GENERATION_SIZE
    watermark: bool = True

    @classmethod
    def from_payload(cls, payload: Any) -> "GenerationRequest":
        if not isinstance(payload, dict):
            raise ValidationError("Invalid request body")
        prompt = payload.get("prompt")
        prompt = prompt.strip() if isinstance(prompt, str) else ""
        if not prompt:
            raise ValidationError("Please enter a prompt")
        size = payload.get("size") or config.DEFAULT_GENERATION_SIZE
        if not isinstance(size, str) or size not in config.GENERATION_SIZES:
            raise ValidationError(f"Unsupported size: {size}")
        watermark = payload.get("watermark")
        if watermark is None:
            watermark = True
        if not isinstance(watermark, bool):
            raise ValidationError("watermark must be a boolean")
        return cls(prompt=prompt, size=size, watermark=watermark)

    def to_upstream(self) -> dict:
        return {
            "model": config.ARK_IMAGE_MODEL,
            "prompt": self.prompt,
            "sequential_image_generation": "disabled",
            "response_format": "url",
            "size": self.size,
            "stream": False,
            "watermark": self.watermark,
        }


@dataclass(frozen=True)
class GeneratedImage:
    src: str
    task_id: Optional[str] = None
    created: Optional[int] = None

    @property
    def created_at(self) -> Optional[datetime]:
        if self.created is None:
            return None
        return datetime.fromtimestamp(self.created)


async def generate(client: httpx.AsyncClient, request: GenerationRequest, api_key: str) -> httpx.Response:
    logger.info("Generating image (size=%s, watermark=%s)", request.size, request.watermark)
    return await post(
        client,
        config.ARK_IMAGE_ENDPOINT,
        fallback=GENERATION_FAILED,
        headers={"Authorization": f"Bearer {api_key}"},
        json=request.to_upstream(),
    )


def extract_generated_image(payload: Any) -> Optional[GeneratedImage]:
    """First image of the response: its URL, else its base64 body as a PNG data URL."""
    if not isinstance(payload, dict):
        return None
    data = payload.get("data")
    if not isinstance(data, list) or not data or not isinstance(data[0], dict):
        return None
    first = data[0]
    if first.get("url"):
        src = first["url"]
    elif first.get("b64_json"):
        src = f"data:image/png;base64,{first['b64_json']}"
    else:
        return None
    created = payload.get("created")
    return GeneratedImage(
        src=src,
        task_id=payload.get("id"),
        created=created if isinstance(created, int) else None,
    )


def parse_generation_response(response: httpx.Response) -> GeneratedImage:
    try:
        payload = response.json()
    except ValueError as e:
        raise ImageProError("Unexpected response from the generation service") from e
    image = extract_generated_image(payload)
    if image is None:
        raise ImageProError("No image URL was returned, please retry")
    return image
