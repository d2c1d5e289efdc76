import logging
from typing import Union

from fastapi import APIRouter, UploadFile, File
from fastapi.responses import JSONResponse

from core.errors import ImageValidationError
from core.image import bytes_to_base64, file_to_bytes, get_filename_with_suffix, is_file_upload
from models.image import ErrorResponse, ProcessedImageResponse
from services.background_removal_service import BackgroundRemovalService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/remove-background", tags=["remove-background"])

def get_background_removal_service():
    return BackgroundRemovalService()

@router.post(
    "",
    response_model=ProcessedImageResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
)
async def remove_background(image: Union[UploadFile, str, None] = File(None, description="Image to cut out")):
    """Remove the background of an image; the result is always a transparent PNG"""
    if not is_file_upload(image):
        return JSONResponse(status_code=400, content={"error": "Missing image upload"})

    try:
        data = await file_to_bytes(image)

        background_removal_service = get_background_removal_service()
        success, output, error = await background_removal_service.remove_background(
            data, image.content_type or "image/png"
        )

        if not success or output is None:
            logger.error("Background removal failed: %s", error)
            return JSONResponse(status_code=500, content={"error": "Failed to remove background"})

        return ProcessedImageResponse(
            filename=get_filename_with_suffix(image.filename, "background-removed", "png"),
            mime_type="image/png",
            data=bytes_to_base64(output),
        )

    except ImageValidationError as e:
        return JSONResponse(status_code=400, content={"error": e.message})
    except Exception:
        logger.exception("Background removal failed")
        return JSONResponse(status_code=500, content={"error": "Failed to remove background"})
