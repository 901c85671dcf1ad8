"""Image recognition through the Ark chat-completions API.

The response is an opaque chat-completions payload. Only
``choices[0].message.content`` is interpreted, and it is modelled as one of
three shapes: a plain string, a list of typed chunks, or nothing usable.
"""
import base64
import json
import logging
from dataclasses import dataclass
from typing import Any, Optional, Union

import httpx

from imagepro import config
from imagepro.compression.models import SourceImage
from imagepro.errors import ImageProError
from imagepro.proxy.client import post

logger = logging.getLogger("imagepro.proxy.recognition")

RECOGNITION_FAILED = "Recognition service call failed"
NO_TEXT_CONTENT = "Recognition succeeded but no text description was returned."


@dataclass(frozen=True)
class PlainText:
    text: str


@dataclass(frozen=True)
class ContentChunk:
    type: str
    text: Optional[str] = None


@dataclass(frozen=True)
class TextChunks:
    chunks: tuple[ContentChunk, ...]


@dataclass(frozen=True)
class NoContent:
    pass


MessageContent = Union[PlainText, TextChunks, NoContent]


@dataclass(frozen=True)
class RecognitionSummary:
    text: str
    raw: Any

    @property
    def display_text(self) -> str:
        return self.text or NO_TEXT_CONTENT

    @property
    def raw_json(self) -> str:
        return json.dumps(self.raw, indent=2, ensure_ascii=False)


def build_payload(source: SourceImage, prompt: str) -> dict:
    encoded = base64.b64encode(source.payload).decode("ascii")
    data_url = f"data:{source.media_type or 'image/png'};base64,{encoded}"
    return {
        "model": config.ARK_VISION_MODEL,
        "messages": [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": prompt},
                    {"type": "image_url", "image_url": {"url": data_url}},
                ],
            }
        ],
    }


async def recognize(client: httpx.AsyncClient, source: SourceImage, prompt: str, api_key: str) -> httpx.Response:
    logger.info("Recognizing %s (%s bytes)", source.filename, source.size)
    return await post(
        client,
        config.ARK_CHAT_ENDPOINT,
        fallback=RECOGNITION_FAILED,
        headers={"Authorization": f"Bearer {api_key}"},
        json=build_payload(source, prompt),
    )


def parse_message_content(payload: Any) -> MessageContent:
    if not isinstance(payload, dict):
        return NoContent()
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return NoContent()
    message = choices[0].get("message")
    content = message.get("content") if isinstance(message, dict) else None
    if isinstance(content, str) and content:
        return PlainText(content)
    if isinstance(content, list) and content:
        return TextChunks(tuple(
            ContentChunk(type=str(chunk.get("type", "")), text=chunk.get("text"))
            for chunk in content
            if isinstance(chunk, dict)
        ))
    return NoContent()


def extract_summary(payload: Any) -> str:
    """Free-text summary: the plain string, or the text chunks in order joined by newlines."""
    content = parse_message_content(payload)
    if isinstance(content, PlainText):
        return content.text
    if isinstance(content, TextChunks):
        texts = [
            chunk.text.strip()
            for chunk in content.chunks
            if chunk.type == "text" and isinstance(chunk.text, str)
        ]
        return "\n".join(t for t in texts if t)
    return ""


def summarize_response(response: httpx.Response) -> RecognitionSummary:
    try:
        payload = response.json()
    except ValueError as e:
        raise ImageProError("Unexpected response from the recognition service") from e
    return RecognitionSummary(text=extract_summary(payload), raw=payload)
