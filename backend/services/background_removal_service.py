"""
Background Removal Service backed by rembg.

rembg sessions load an ONNX model from disk, so they are created on first use
and cached per model name for the life of the process.
"""
import io
import logging
from typing import Any, Dict, Tuple, Optional

from fastapi.concurrency import run_in_threadpool
from PIL import Image

from config.settings import settings

logger = logging.getLogger(__name__)

# Model sessions cache to avoid reloading per request
_SESSION_CACHE: Dict[str, Any] = {}


def get_session(model_name: str):
    """Return the cached rembg session for ``model_name``, creating it on first use."""
    session = _SESSION_CACHE.get(model_name)
    if session is None:
        from rembg import new_session

        logger.info("Loading rembg model %s", model_name)
        session = new_session(model_name)
        _SESSION_CACHE[model_name] = session
    return session


def coerce_to_bytes(result: Any) -> bytes:
    """
    Normalize a segmentation result to PNG-ready bytes.

    The backend may hand back raw bytes, a PIL image or a readable stream
    depending on the input type and library version.
    """
    if isinstance(result, (bytes, bytearray, memoryview)):
        return bytes(result)

    if isinstance(result, Image.Image):
        output = io.BytesIO()
        result.save(output, format="PNG")
        return output.getvalue()

    if hasattr(result, "read"):
        if hasattr(result, "seek"):
            result.seek(0)
        return coerce_to_bytes(result.read())

    raise TypeError(f"Unsupported background removal result: {type(result).__name__}")


class BackgroundRemovalService:
    """Service for foreground extraction with a transparent PNG result."""

    def __init__(self, model_name: Optional[str] = None):
        self.model_name = model_name or settings.REMBG_MODEL

    def _run_backend(self, data: bytes) -> Any:
        from rembg import remove

        return remove(data, session=get_session(self.model_name))

    async def remove_background(self, data: bytes, mime_type: str) -> Tuple[bool, Optional[bytes], Optional[str]]:
        """
        Strip the background from an image.

        Args:
            data: Validated upload bytes
            mime_type: Declared MIME type of the upload

        Returns:
            Tuple of (success, png_bytes, error_message)
        """
        try:
            logger.debug("Removing background from %s upload (%d bytes)", mime_type, len(data))
            result = await run_in_threadpool(self._run_backend, data)
            output = coerce_to_bytes(result)
            if not output:
                return False, None, "Background removal returned no data"
            return True, output, None
        except Exception as error:
            return False, None, f"Background removal failed: {str(error)}"
