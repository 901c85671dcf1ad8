"""HTML routes for the landing page and the four feature pages.

Each POST builds its own FeatureSession, runs one operation through it and
renders the resulting snapshot; nothing is kept between requests.
"""
import asyncio
import logging
from typing import Optional

import httpx
from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import HTMLResponse

from imagepro import config
from imagepro.compression import compress, quality_from_percent
from imagepro.errors import ValidationError
from imagepro.pages.state import FeatureSession, PageState
from imagepro.pages import views
from imagepro.proxy.client import get_http_client, read_upload, require_credential
from imagepro.proxy.generation import GenerationRequest, generate, parse_generation_response
from imagepro.proxy.recognition import recognize, summarize_response
from imagepro.proxy.removal import remove_background

logger = logging.getLogger("imagepro.pages")
router = APIRouter(tags=["pages"], default_response_class=HTMLResponse)


async def _select_upload(session: FeatureSession, image_file: Optional[UploadFile]) -> bool:
    """Pass the upload through the validation gate. False when it was rejected."""
    try:
        source = await read_upload(image_file)
    except ValidationError as e:
        session.reject(e.message)
        return False
    session.select(source)
    return True


@router.get("/")
def landing():
    return views.render_landing()


@router.get("/compress")
def compress_page():
    return views.render_compress(PageState())


@router.post("/compress")
async def compress_submit(
    image_file: Optional[UploadFile] = File(None),
    quality: float = Form(config.DEFAULT_QUALITY_PERCENT),
):
    fraction = quality_from_percent(quality)
    session = FeatureSession()
    if await _select_upload(session, image_file):
        source = session.state.source
        await session.run(lambda: asyncio.to_thread(compress, source, fraction))
    return views.render_compress(session.state, int(round(fraction * 100)))


@router.get("/remove-bg")
def remove_bg_page():
    return views.render_remove_bg(PageState())


@router.post("/remove-bg")
async def remove_bg_submit(
    image_file: Optional[UploadFile] = File(None),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    session = FeatureSession()
    if await _select_upload(session, image_file):
        source = session.state.source

        async def operation():
            api_key = require_credential(config.REMOVE_BG_API_KEY, "REMOVE_BG_API_KEY")
            return await remove_background(client, source, "auto", api_key)

        await session.run(operation)
    return views.render_remove_bg(session.state)


@router.get("/recognition")
def recognition_page():
    return views.render_recognition(PageState())


@router.post("/recognition")
async def recognition_submit(
    image_file: Optional[UploadFile] = File(None),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    session = FeatureSession()
    if await _select_upload(session, image_file):
        source = session.state.source

        async def operation():
            api_key = require_credential(config.ARK_API_KEY, "ARK_API_KEY")
            response = await recognize(client, source, config.PAGE_RECOGNITION_PROMPT, api_key)
            return summarize_response(response)

        await session.run(operation)
    return views.render_recognition(session.state)


@router.get("/ai-gen")
def ai_gen_page():
    return views.render_ai_gen(PageState())


@router.post("/ai-gen")
async def ai_gen_submit(
    prompt: str = Form(""),
    size: str = Form(config.DEFAULT_GENERATION_SIZE),
    watermark: bool = Form(False),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    session = FeatureSession()

    async def operation():
        request = GenerationRequest.from_payload({"prompt": prompt, "size": size, "watermark": watermark})
        api_key = require_credential(config.ARK_API_KEY, "ARK_API_KEY")
        response = await generate(client, request, api_key)
        return parse_generation_response(response)

    await session.run(operation)
    return views.render_ai_gen(session.state, prompt=prompt, size=size, watermark=watermark)
