from pydantic import BaseModel, ConfigDict, Field

class ErrorResponse(BaseModel):
    error: str

class ProcessedImageResponse(BaseModel):
    """Re-encoded or background-removed image returned as base64"""
    model_config = ConfigDict(populate_by_name=True)

    filename: str = Field(..., description="Suggested download filename")
    mime_type: str = Field(..., alias="mimeType", description="MIME type of the encoded image")
    data: str = Field(..., description="Base64 encoded image bytes")
