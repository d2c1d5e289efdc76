from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict, Any

class LabelScore(BaseModel):
    label: str
    score: float

class RecognitionResponse(BaseModel):
    """Vision-language description of an uploaded image"""
    model_config = ConfigDict(populate_by_name=True)

    result: str = Field("", description="Text extracted from the model reply")
    preview: str = Field(..., description="Base64 encoded original image")
    mime_type: str = Field(..., alias="mimeType", description="MIME type of the preview")
    raw: Optional[Dict[str, Any]] = Field(None, description="Backend response payload")

class ClassificationResponse(BaseModel):
    """Ranked labels for an uploaded image"""
    model_config = ConfigDict(populate_by_name=True)

    model: str = Field(..., description="Classification model id")
    labels: List[LabelScore] = Field(default_factory=list, description="Labels sorted by score, highest first")
    preview: str = Field(..., description="Base64 encoded original image")
    mime_type: str = Field(..., alias="mimeType", description="MIME type of the preview")

class ServiceHealth(BaseModel):
    configured: bool
    message: str
