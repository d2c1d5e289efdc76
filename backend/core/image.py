"""
Upload validation and response encoding helpers shared by every image route.
"""
import base64
from typing import Any, Optional

from starlette.datastructures import UploadFile

from config.settings import settings
from core.errors import EmptyUpload, MissingUpload, UploadTooLarge

MAX_UPLOAD_BYTES = settings.MAX_UPLOAD_SIZE

MIME_TYPES = {
    "jpeg": "image/jpeg",
    "jpg": "image/jpeg",
    "png": "image/png",
    "webp": "image/webp",
    "avif": "image/avif",
}
DEFAULT_MIME_TYPE = "application/octet-stream"


def _too_large(max_bytes: int) -> UploadTooLarge:
    return UploadTooLarge(f"Image exceeds {max_bytes // (1024 * 1024)}MB limit")


def is_file_upload(value: Any) -> bool:
    """True only for a real multipart file part, not a plain text field."""
    return isinstance(value, UploadFile)


async def file_to_bytes(upload: Optional[UploadFile], max_bytes: int = MAX_UPLOAD_BYTES) -> bytes:
    """
    Validate an uploaded file and read it fully into memory.

    Args:
        upload: The multipart file value, or None when the field was absent
        max_bytes: Size ceiling in bytes

    Returns:
        The upload contents

    Raises:
        MissingUpload: No file-like value was submitted
        EmptyUpload: The file has no content
        UploadTooLarge: The file is larger than max_bytes
    """
    if not is_file_upload(upload):
        raise MissingUpload()

    # Reject early when the multipart parser already knows the size
    if upload.size is not None and upload.size > max_bytes:
        raise _too_large(max_bytes)

    data = await upload.read()

    if len(data) == 0:
        raise EmptyUpload()

    if len(data) > max_bytes:
        raise _too_large(max_bytes)

    return data


def bytes_to_base64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def base64_to_bytes(encoded: str) -> bytes:
    return base64.b64decode(encoded)


def infer_mime_type(fmt: Optional[str]) -> str:
    """Map an image format name (jpeg, png, webp, avif) to its MIME type."""
    if not fmt:
        return DEFAULT_MIME_TYPE
    return MIME_TYPES.get(fmt.lower(), DEFAULT_MIME_TYPE)


def infer_upload_mime_type(content_type: Optional[str], filename: Optional[str]) -> str:
    """
    Best guess at an upload's MIME type.

    The declared type wins. Otherwise the filename extension is looked up, so an
    unknown extension (or a name without a dot) gives application/octet-stream.
    Only an upload with no name at all falls back to JPEG.
    """
    if content_type and content_type.strip():
        return content_type.strip()

    if filename:
        return infer_mime_type(filename.rsplit(".", 1)[-1])

    return "image/jpeg"


def extension_for_format(fmt: str) -> str:
    return "jpg" if fmt == "jpeg" else fmt


def get_filename_with_suffix(original_name: Optional[str], suffix: str, extension: Optional[str] = None) -> str:
    """
    Build a download name such as ``photo-compressed.jpg`` from ``photo.png``.

    Only the last extension is stripped; a missing name becomes ``image``.
    """
    base = "image"
    if original_name:
        stem, dot, ext = original_name.rpartition(".")
        base = stem if dot and stem and ext else original_name

    ext = f".{extension}" if extension else ""
    return f"{base}-{suffix}{ext}"
