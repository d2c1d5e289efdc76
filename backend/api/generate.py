import logging
from typing import Optional

from fastapi import APIRouter, Form
from fastapi.responses import JSONResponse, Response

from core.errors import ConfigurationError, MissingPrompt
from core.hf import is_hf_configured
from core.params import (
    parse_guidance,
    parse_model,
    parse_negative_prompt,
    parse_prompt,
    parse_seed,
    parse_steps,
)
from models.image import ErrorResponse
from models.processing import GenerationOptions
from models.recognition import ServiceHealth
from services.huggingface_service import HuggingFaceService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/generate", tags=["generate"])

def get_huggingface_service():
    return HuggingFaceService()

@router.post(
    "",
    response_class=Response,
    responses={
        200: {"content": {"image/png": {}}, "description": "Generated image"},
        500: {"model": ErrorResponse},
    }
)
async def generate_image(
    prompt: Optional[str] = Form(None, description="What to draw"),
    negative_prompt: Optional[str] = Form(None, alias="negativePrompt", description="What to avoid"),
    steps: Optional[str] = Form(None, description="Inference steps, clamped to 10-50"),
    guidance: Optional[str] = Form(None, description="Guidance scale, clamped to 1-20"),
    seed: Optional[str] = Form(None, description="Random seed"),
    model: Optional[str] = Form(None, description="Hugging Face text-to-image model id"),
):
    """Generate an image from a text prompt and return the raw PNG bytes"""
    try:
        huggingface_service = get_huggingface_service()
        options = GenerationOptions(
            prompt=parse_prompt(prompt),
            negative_prompt=parse_negative_prompt(negative_prompt),
            steps=parse_steps(steps),
            guidance=parse_guidance(guidance),
            seed=parse_seed(seed),
            model=parse_model(model, huggingface_service.default_generation_model),
        )

        success, image_bytes, error = await huggingface_service.text_to_image(options)

        if not success or image_bytes is None:
            logger.error("Image generation with %s failed: %s", options.model, error)
            return JSONResponse(status_code=500, content={"error": "Failed to generate image"})

        return Response(
            content=image_bytes,
            media_type="image/png",
            headers={
                "Content-Disposition": "inline; filename=generated.png",
                "Cache-Control": "no-store",
            },
        )

    except MissingPrompt as e:
        return JSONResponse(status_code=500, content={"error": e.message})
    except ConfigurationError as e:
        logger.error("Image generation unavailable: %s", e)
        return JSONResponse(status_code=500, content={"error": "Server configuration error"})
    except Exception:
        logger.exception("Image generation failed")
        return JSONResponse(status_code=500, content={"error": "Failed to generate image"})

@router.get("/health", response_model=ServiceHealth)
async def check_generation_config():
    """Check if the Hugging Face credential is configured"""
    has_key = is_hf_configured()

    return ServiceHealth(
        configured=has_key,
        message="Hugging Face API key configured" if has_key else "Hugging Face API key not set"
    )
