import logging
from typing import Union

from fastapi import APIRouter, UploadFile, File
from fastapi.responses import JSONResponse

from core.errors import ImageValidationError
from core.image import bytes_to_base64, file_to_bytes, infer_upload_mime_type, is_file_upload
from models.image import ErrorResponse
from models.recognition import RecognitionResponse, ServiceHealth
from services.ark_vision_service import ArkVisionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recognize", tags=["recognize"])

def get_ark_vision_service():
    return ArkVisionService()

@router.post(
    "",
    response_model=RecognitionResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
)
async def recognize_image(image: Union[UploadFile, str, None] = File(None, description="Image to describe")):
    """Describe an image with the Volcengine Ark vision-language model"""
    ark_vision_service = get_ark_vision_service()
    if not ark_vision_service.api_key:
        logger.error("Missing ARK_API_KEY environment variable")
        return JSONResponse(status_code=500, content={"error": "Server configuration error"})

    if not is_file_upload(image):
        return JSONResponse(status_code=400, content={"error": "Missing image upload"})

    try:
        data = await file_to_bytes(image)
        preview = bytes_to_base64(data)
        mime_type = infer_upload_mime_type(image.content_type, image.filename)

        success, result, error = await ark_vision_service.recognize(preview, mime_type)

        if not success or result is None:
            # The backend message is the best explanation available to the user
            logger.error("Image recognition failed: %s", error)
            return JSONResponse(status_code=500, content={"error": error or "Failed to recognize image"})

        text, raw = result
        return RecognitionResponse(
            result=text,
            preview=preview,
            mime_type=mime_type,
            raw=raw,
        )

    except ImageValidationError as e:
        return JSONResponse(status_code=400, content={"error": e.message})
    except Exception:
        logger.exception("Image recognition failed")
        return JSONResponse(status_code=500, content={"error": "Failed to recognize image"})

@router.get("/health", response_model=ServiceHealth)
async def check_ark_config():
    """Check if the Volcengine Ark credential is configured"""
    ark_vision_service = get_ark_vision_service()
    has_key = bool(ark_vision_service.api_key)

    return ServiceHealth(
        configured=has_key,
        message="Ark API key configured" if has_key else "Ark API key not set"
    )
