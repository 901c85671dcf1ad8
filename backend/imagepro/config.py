"""Application configuration. Loads from environment and .env file."""
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent
# Load .env from cwd, then backend/.env, then project root .env
load_dotenv()
load_dotenv(BASE_DIR / ".env")
load_dotenv(BASE_DIR.parent / ".env")

# Credentials (never logged). Read through this module at request time.
ARK_API_KEY = os.getenv("ARK_API_KEY", "").strip() or None
REMOVE_BG_API_KEY = os.getenv("REMOVE_BG_API_KEY", "").strip() or None

# External APIs
ARK_IMAGE_ENDPOINT = os.getenv("ARK_IMAGE_ENDPOINT", "https://ark.cn-beijing.volces.com/api/v3/images/generations")
ARK_IMAGE_MODEL = os.getenv("ARK_IMAGE_MODEL", "ep-20250922151247-nzclw")
ARK_CHAT_ENDPOINT = os.getenv("ARK_CHAT_ENDPOINT", "https://ark.cn-beijing.volces.com/api/v3/chat/completions")
ARK_VISION_MODEL = os.getenv("ARK_VISION_MODEL", "ep-20250921140145-v9tg9")
REMOVE_BG_ENDPOINT = os.getenv("REMOVE_BG_ENDPOINT", "https://api.remove.bg/v1.0/removebg")
UPSTREAM_TIMEOUT = float(os.getenv("UPSTREAM_TIMEOUT", "120"))

# Supported inputs
ALLOWED_MEDIA_TYPES = ("image/jpeg", "image/png", "image/webp")
MAX_IMAGE_SIZE_MB = int(os.getenv("MAX_IMAGE_SIZE_MB", "10"))
MAX_IMAGE_SIZE_BYTES = MAX_IMAGE_SIZE_MB * 1024 * 1024

# Compression slider (percent)
DEFAULT_QUALITY_PERCENT = int(os.getenv("DEFAULT_QUALITY_PERCENT", "80"))
MIN_QUALITY_PERCENT = int(os.getenv("MIN_QUALITY_PERCENT", "40"))
QUALITY_STEP_PERCENT = int(os.getenv("QUALITY_STEP_PERCENT", "5"))

# Generation
GENERATION_SIZES = {
    "1024x1024": "Square 1024",
    "1280x720": "Landscape 1280x720",
    "2K": "High resolution 2K",
}
DEFAULT_GENERATION_SIZE = "1024x1024"

# Recognition
DEFAULT_RECOGNITION_PROMPT = os.getenv("DEFAULT_RECOGNITION_PROMPT", "Recognize the image")
PAGE_RECOGNITION_PROMPT = "Recognize the image content and provide a structured description"

# Server (for uvicorn)
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
# CORS: comma-separated origins, e.g. "http://localhost:3000,http://127.0.0.1:3000"
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",") if o.strip()]

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("imagepro")
