import logging
from typing import Optional, Union

from fastapi import APIRouter, UploadFile, File, Form
from fastapi.responses import JSONResponse

from core.errors import ImageValidationError
from core.image import (
    bytes_to_base64,
    extension_for_format,
    file_to_bytes,
    get_filename_with_suffix,
    infer_mime_type,
    is_file_upload,
)
from core.params import parse_dimension, parse_format, parse_quality
from models.image import ErrorResponse, ProcessedImageResponse
from models.processing import CompressionOptions
from services.compression_service import CompressionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/compress", tags=["compress"])

def get_compression_service():
    return CompressionService()

@router.post(
    "",
    response_model=ProcessedImageResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
)
async def compress_image(
    image: Union[UploadFile, str, None] = File(None, description="Image to re-encode"),
    format: Optional[str] = Form(None, description="jpeg, png, webp or avif"),
    quality: Optional[str] = Form(None, description="Encoder quality, clamped to 40-95"),
    width: Optional[str] = Form(None, description="Maximum width in pixels"),
    height: Optional[str] = Form(None, description="Maximum height in pixels"),
):
    """Resize (never upscaling) and re-encode an image"""
    if not is_file_upload(image):
        return JSONResponse(status_code=400, content={"error": "Missing image upload"})

    try:
        data = await file_to_bytes(image)

        output_format = parse_format(format)
        options = CompressionOptions(
            format=output_format,
            quality=parse_quality(quality, output_format),
            width=parse_dimension(width),
            height=parse_dimension(height),
        )

        compression_service = get_compression_service()
        success, output, error = await compression_service.compress(data, options)

        if not success or output is None:
            logger.error("Image compression failed: %s", error)
            return JSONResponse(status_code=500, content={"error": "Failed to compress image"})

        return ProcessedImageResponse(
            filename=get_filename_with_suffix(
                image.filename, "compressed", extension_for_format(options.format)
            ),
            mime_type=infer_mime_type(options.format),
            data=bytes_to_base64(output),
        )

    except ImageValidationError as e:
        return JSONResponse(status_code=400, content={"error": e.message})
    except Exception:
        logger.exception("Image compression failed")
        return JSONResponse(status_code=500, content={"error": "Failed to compress image"})
