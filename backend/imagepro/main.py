"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from imagepro.api import pages, routes
from imagepro.config import CORS_ORIGINS, logger as config_logger
from imagepro.errors import ImageProError

logging.getLogger("uvicorn").setLevel(logging.INFO)


@asynccontextmanager
async def lifespan(app: FastAPI):
    config_logger.info("ImagePro started")
    yield
    config_logger.info("ImagePro shutting down")


app = FastAPI(
    title="ImagePro",
    description="Image compression, background removal, recognition and AI generation.",
    version="1.0.0",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS if CORS_ORIGINS else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ImageProError)
async def imagepro_error_handler(request: Request, exc: ImageProError):
    """Render every handled error as {"error": message} with its status."""
    if exc.status_code >= 500:
        config_logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


app.include_router(routes.router)
app.include_router(pages.router)


if __name__ == "__main__":
    import uvicorn
    from imagepro.config import HOST, PORT
    uvicorn.run("imagepro.main:app", host=HOST, port=PORT, reload=True)
