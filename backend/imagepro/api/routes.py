"""API routes: in-process compression and the credential-bearing proxies."""
import asyncio
import json
import logging
from typing import Optional

import httpx
from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import Response

from imagepro import config
from imagepro.compression import compress
from imagepro.errors import ExternalServiceError, ValidationError
from imagepro.proxy.client import get_http_client, read_upload, require_credential
from imagepro.proxy.generation import GenerationRequest, generate
from imagepro.proxy.recognition import recognize
from imagepro.proxy.removal import remove_background

logger = logging.getLogger("imagepro.api")
router = APIRouter(prefix="/api", tags=["imagepro"])


def _json_error(message: str, status_code: int) -> Response:
    return Response(
        content=json.dumps({"error": message}, ensure_ascii=False),
        status_code=status_code,
        media_type="application/json",
    )


def _relay_json(exc: ExternalServiceError) -> Response:
    """External body verbatim when there is one, else a generic error. Status preserved."""
    logger.warning("Relaying external failure (status %s)", exc.status_code)
    if exc.body:
        return Response(content=exc.body, status_code=exc.status_code, media_type="application/json")
    return _json_error(exc.fallback, exc.status_code)


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/limits")
def get_limits():
    """Return upload and quality limits for the client."""
    return {
        "max_image_size_mb": config.MAX_IMAGE_SIZE_MB,
        "max_image_size_bytes": config.MAX_IMAGE_SIZE_BYTES,
        "allowed_media_types": list(config.ALLOWED_MEDIA_TYPES),
        "quality": {
            "default_percent": config.DEFAULT_QUALITY_PERCENT,
            "min_percent": config.MIN_QUALITY_PERCENT,
            "step_percent": config.QUALITY_STEP_PERCENT,
        },
    }


@router.get("/formats")
def get_formats():
    return {
        "image": list(config.ALLOWED_MEDIA_TYPES),
        "generation_sizes": list(config.GENERATION_SIZES),
    }


@router.post("/compress")
async def compress_image(
    image_file: Optional[UploadFile] = File(None),
    quality: float = Form(config.DEFAULT_QUALITY_PERCENT / 100),
):
    """Re-encode an uploaded image at quality (0-1) and return the bytes."""
    source = await read_upload(image_file)
    result = await asyncio.to_thread(compress, source, quality)
    return Response(
        content=result.payload,
        media_type=result.media_type,
        headers={
            "Content-Disposition": f'attachment; filename="{result.download_name(source.filename)}"',
            "X-Original-Size": str(source.size),
            "X-Compressed-Size": str(result.size),
            "X-Image-Width": str(result.width),
            "X-Image-Height": str(result.height),
        },
    )


@router.post("/ai-generate")
async def ai_generate(request: Request, client: httpx.AsyncClient = Depends(get_http_client)):
    api_key = require_credential(config.ARK_API_KEY, "ARK_API_KEY")
    try:
        body = await request.json()
    except ValueError:
        raise ValidationError("Invalid request body")
    generation = GenerationRequest.from_payload(body)
    try:
        response = await generate(client, generation, api_key)
    except ExternalServiceError as e:
        return _relay_json(e)
    return Response(content=response.content, status_code=200, media_type="application/json")


@router.post("/recognize")
async def recognize_image(
    image_file: Optional[UploadFile] = File(None),
    prompt: Optional[str] = Form(None),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    api_key = require_credential(config.ARK_API_KEY, "ARK_API_KEY")
    source = await read_upload(image_file)
    try:
        response = await recognize(client, source, prompt if prompt is not None else config.DEFAULT_RECOGNITION_PROMPT, api_key)
    except ExternalServiceError as e:
        return _relay_json(e)
    return Response(content=response.content, status_code=200, media_type="application/json")


@router.post("/remove-bg")
async def remove_bg(
    image_file: Optional[UploadFile] = File(None),
    size: str = Form("auto"),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    api_key = require_credential(config.REMOVE_BG_API_KEY, "REMOVE_BG_API_KEY")
    source = await read_upload(image_file)
    try:
        removed = await remove_background(client, source, size, api_key)
    except ExternalServiceError as e:
        logger.warning("Background removal failed (status %s)", e.status_code)
        return _json_error(e.text or e.fallback, e.status_code)
    return Response(
        content=removed.payload,
        status_code=200,
        media_type=removed.media_type,
        headers={"Content-Disposition": "inline; filename=no-bg.png"},
    )
