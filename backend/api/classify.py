import logging
from typing import Optional, Union

from fastapi import APIRouter, UploadFile, File, Form
from fastapi.responses import JSONResponse

from core.errors import ConfigurationError, ImageValidationError
from core.hf import is_hf_configured
from core.image import bytes_to_base64, file_to_bytes, infer_upload_mime_type, is_file_upload
from core.params import parse_model
from models.image import ErrorResponse
from models.recognition import ClassificationResponse, ServiceHealth
from services.huggingface_service import HuggingFaceService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/classify", tags=["classify"])

def get_huggingface_service():
    return HuggingFaceService()

@router.post(
    "",
    response_model=ClassificationResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
)
async def classify_image(
    image: Union[UploadFile, str, None] = File(None, description="Image to classify"),
    model: Optional[str] = Form(None, description="Hugging Face image-classification model id"),
):
    """Rank labels for an image with a hosted classification model"""
    if not is_file_upload(image):
        return JSONResponse(status_code=400, content={"error": "Missing image upload"})

    try:
        data = await file_to_bytes(image)
        mime_type = infer_upload_mime_type(image.content_type, image.filename)

        huggingface_service = get_huggingface_service()
        model_id = parse_model(model, huggingface_service.default_classification_model)

        success, labels, error = await huggingface_service.classify_image(data, mime_type, model_id)

        if not success or labels is None:
            logger.error("Image classification with %s failed: %s", model_id, error)
            return JSONResponse(status_code=500, content={"error": "Failed to classify image"})

        return ClassificationResponse(
            model=model_id,
            labels=labels,
            preview=bytes_to_base64(data),
            mime_type=mime_type,
        )

    except ImageValidationError as e:
        return JSONResponse(status_code=400, content={"error": e.message})
    except ConfigurationError as e:
        logger.error("Image classification unavailable: %s", e)
        return JSONResponse(status_code=500, content={"error": "Server configuration error"})
    except Exception:
        logger.exception("Image classification failed")
        return JSONResponse(status_code=500, content={"error": "Failed to classify image"})

@router.get("/health", response_model=ServiceHealth)
async def check_classification_config():
    """Check if the Hugging Face credential is configured"""
    has_key = is_hf_configured()

    return ServiceHealth(
        configured=has_key,
        message="Hugging Face API key configured" if has_key else "Hugging Face API key not set"
    )
