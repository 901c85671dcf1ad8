"""Re-encode an image at a requested quality, keeping its pixel dimensions."""
import logging
from io import BytesIO

from PIL import Image, ImageOps, UnidentifiedImageError

from imagepro import config
from imagepro.compression.models import CODECS, LOSSLESS_MEDIA_TYPES, EncodedResult, SourceImage
from imagepro.errors import DecodeError, SurfaceError, ValidationError

logger = logging.getLogger("imagepro.compression")

COMPACT_MODES = ("1", "L", "LA", "P")


def output_media_type(source_media_type: str) -> str:
    """PNG and WebP keep their codec; everything else is encoded as JPEG."""
    if source_media_type in ("image/png", "image/webp"):
        return source_media_type
    return "image/jpeg"


def quality_from_percent(percent: float) -> float:
    """Snap a slider percentage to the step grid, clamp it to [floor, 100] and return the fraction."""
    step = config.QUALITY_STEP_PERCENT
    snapped = int(round(float(percent) / step)) * step
    snapped = max(config.MIN_QUALITY_PERCENT, min(100, snapped))
    return snapped / 100.0


def _surface_mode(image: Image.Image, media_type: str) -> str:
    # Lossless output keeps grayscale and palette images in their own mode.
    if media_type in LOSSLESS_MEDIA_TYPES and image.mode in COMPACT_MODES:
        return image.mode
    return "RGBA" if "A" in image.getbands() or image.mode == "P" else "RGB"


def _copy_to_surface(image: Image.Image, mode: str) -> Image.Image:
    width, height = image.size
    surface = _allocate_surface(mode, width, height)
    converted = image if image.mode == mode else image.convert(mode)
    try:
        if mode == "P":
            rawmode = image.palette.mode
            surface.putpalette(image.getpalette(rawmode), rawmode)
        surface.paste(converted, (0, 0))
    except Exception:
        surface.close()
        raise
    finally:
        if converted is not image:
            converted.close()
    if "transparency" in image.info:
        surface.info["transparency"] = image.info["transparency"]
    return surface


def _decode(source: SourceImage, media_type: str) -> Image.Image:
    """Decode the payload and copy it onto a surface of the native size. Every intermediate image is closed."""
    try:
        with Image.open(BytesIO(source.payload)) as img:
            img.load()
            oriented = ImageOps.exif_transpose(img)
            try:
                return _copy_to_surface(oriented, _surface_mode(oriented, media_type))
            finally:
                if oriented is not img:
                    oriented.close()
    except (DecodeError, SurfaceError):
        raise
    except Image.DecompressionBombError as e:
        raise SurfaceError(f"Image is too large to draw: {e}") from e
    except MemoryError as e:
        raise SurfaceError() from e
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
        logger.warning("Decode failed for %s: %s", source.filename, e)
        raise DecodeError() from e


def _allocate_surface(mode: str, width: int, height: int) -> Image.Image:
    if width <= 0 or height <= 0:
        raise SurfaceError()
    try:
        return Image.new(mode, (width, height))
    except (MemoryError, ValueError) as e:
        raise SurfaceError() from e


def compress(source: SourceImage, quality: float) -> EncodedResult:
    """Re-encode ``source`` at ``quality`` (0-1).

    PNG sources are written losslessly and ignore ``quality``; WebP and JPEG
    sources are written with the same codec at the given quality.
    """
    if not 0.0 <= quality <= 1.0:
        raise ValidationError("Quality must be between 0 and 1")
    media_type = output_media_type(source.media_type)
    surface = _decode(source, media_type)
    width, height = surface.size
    try:
        save_kw: dict = {"format": CODECS[media_type]}
        if media_type == "image/jpeg":
            if surface.mode != "RGB":
                flattened = surface.convert("RGB")
                surface.close()
                surface = flattened
            save_kw.update(quality=int(round(quality * 100)), optimize=True)
        elif media_type == "image/webp":
            save_kw["quality"] = int(round(quality * 100))
        elif media_type in LOSSLESS_MEDIA_TYPES:
            save_kw["optimize"] = True
        buf = BytesIO()
        surface.save(buf, **save_kw)
    finally:
        surface.close()
    result = EncodedResult(
        payload=buf.getvalue(),
        media_type=media_type,
        width=width,
        height=height,
    )
    logger.info(
        "Compressed %s (%s, %s bytes) -> %s bytes at quality %.2f",
        source.filename, media_type, source.size, result.size, quality,
    )
    return result
