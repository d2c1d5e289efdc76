"""
Compression Service for re-encoding and resizing uploaded images with Pillow.
"""
import io
import logging
from typing import Tuple, Optional

from fastapi.concurrency import run_in_threadpool
from PIL import Image, ImageOps, UnidentifiedImageError

from models.processing import CompressionOptions

logger = logging.getLogger(__name__)

DEFAULT_QUALITY = {
    "jpeg": 80,
    "webp": 80,
    "avif": 45,
}

PIL_FORMATS = {
    "jpeg": "JPEG",
    "png": "PNG",
    "webp": "WEBP",
    "avif": "AVIF",
}


def _fit_inside(image: Image.Image, width: Optional[int], height: Optional[int]) -> Image.Image:
    """Shrink to fit inside width x height keeping aspect ratio; never enlarges."""
    if not width and not height:
        return image

    box = (width or image.width, height or image.height)
    if image.width <= box[0] and image.height <= box[1]:
        return image

    resized = image.copy()
    resized.thumbnail(box, Image.Resampling.LANCZOS)
    return resized


def _flatten_alpha(image: Image.Image) -> Image.Image:
    """JPEG has no alpha channel: composite onto white."""
    if image.mode in ("RGBA", "LA") or (image.mode == "P" and "transparency" in image.info):
        rgba = image.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background
    if image.mode != "RGB":
        return image.convert("RGB")
    return image


def _to_rgb_or_rgba(image: Image.Image) -> Image.Image:
    has_alpha = "A" in image.getbands() or "transparency" in image.info
    return image.convert("RGBA" if has_alpha else "RGB")


def _encode(image: Image.Image, options: CompressionOptions) -> bytes:
    fmt = options.format
    quality = options.quality if options.quality is not None else DEFAULT_QUALITY.get(fmt)
    save_kwargs = {}

    if fmt == "jpeg":
        image = _flatten_alpha(image)
        save_kwargs = {"quality": quality, "optimize": True, "progressive": True}
    elif fmt == "png":
        save_kwargs = {"optimize": True, "compress_level": 9}
    elif fmt == "webp":
        save_kwargs = {"quality": quality, "method": 6}
    elif fmt == "avif":
        save_kwargs = {"quality": quality}

    if fmt in ("webp", "avif") and image.mode not in ("RGB", "RGBA"):
        image = _to_rgb_or_rgba(image)
    elif fmt == "png" and image.mode not in ("1", "L", "LA", "I", "P", "RGB", "RGBA"):
        image = _to_rgb_or_rgba(image)

    output = io.BytesIO()
    image.save(output, format=PIL_FORMATS[fmt], **save_kwargs)
    return output.getvalue()


def compress_image_bytes(data: bytes, options: CompressionOptions) -> bytes:
    """Resize (optional) and re-encode image bytes. Blocking; call from a worker thread."""
    with Image.open(io.BytesIO(data)) as image:
        image.load()
        # Honour camera orientation before resizing
        image = ImageOps.exif_transpose(image)
        image = _fit_inside(image, options.width, options.height)
        return _encode(image, options)


class CompressionService:
    """Service for lossy re-encoding and inside-fit resizing."""

    async def compress(self, data: bytes, options: CompressionOptions) -> Tuple[bool, Optional[bytes], Optional[str]]:
        """
        Re-encode an image to the requested format and quality.

        Args:
            data: Validated upload bytes
            options: Normalized format, quality and target box

        Returns:
            Tuple of (success, output_bytes, error_message)
        """
        try:
            output = await run_in_threadpool(compress_image_bytes, data, options)
            logger.debug(
                "Compressed image to %s: %d -> %d bytes", options.format, len(data), len(output)
            )
            return True, output, None
        except UnidentifiedImageError:
            return False, None, "Uploaded file is not a readable image"
        except Exception as error:
            return False, None, f"Image encoding failed: {str(error)}"
