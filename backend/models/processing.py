from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Literal

ImageFormat = Literal['jpeg', 'png', 'webp', 'avif']

class CompressionOptions(BaseModel):
    """Normalized re-encode/resize parameters for one request"""
    model_config = ConfigDict(frozen=True)

    format: ImageFormat = Field('jpeg', description="Target output format")
    quality: Optional[int] = Field(None, ge=40, le=95, description="Encoder quality, None for the encoder default")
    width: Optional[int] = Field(None, gt=0, description="Maximum output width in pixels")
    height: Optional[int] = Field(None, gt=0, description="Maximum output height in pixels")

class GenerationOptions(BaseModel):
    """Normalized text-to-image parameters for one request"""
    model_config = ConfigDict(frozen=True)

    prompt: str = Field(..., min_length=1, description="Positive prompt")
    model: str = Field(..., description="Text-to-image model id")
    negative_prompt: Optional[str] = Field(None, description="Negative prompt")
    steps: Optional[int] = Field(None, ge=10, le=50, description="Number of inference steps")
    guidance: Optional[float] = Field(None, ge=1, le=20, description="Guidance scale")
    seed: Optional[int] = Field(None, description="Random seed")
