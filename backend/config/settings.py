from pydantic_settings import BaseSettings
from typing import List
from pathlib import Path

class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # API Settings
    API_PREFIX: str = "/api"
    PROJECT_NAME: str = "Image Toolbox API"
    VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"

    # Server Settings
    HOST: str = "127.0.0.1"
    PORT: int = 8000

    # Upload Limits
    MAX_UPLOAD_SIZE: int = 15 * 1024 * 1024  # 15MB

    # External APIs
    # Credentials (ARK_API_KEY, HUGGING_FACE_API_KEY) are read by the services
    REQUEST_TIMEOUT_SECONDS: float = 60.0
    ARK_API_URL: str = "https://ark.cn-beijing.volces.com/api/v3/chat/completions"
    ARK_MODEL_ID: str = "doubao-1.5-vision-lite-250315"
    ARK_RECOGNITION_PROMPT: str = "识别图片"
    HF_INFERENCE_URL: str = "https://router.huggingface.co/hf-inference/models"
    HF_CLASSIFICATION_MODEL: str = "google/vit-base-patch16-224"
    HF_GENERATION_MODEL: str = "stabilityai/stable-diffusion-xl-base-1.0"

    # Background removal
    REMBG_MODEL: str = "u2net"

    # CORS Settings
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173"
    ]

    class Config:
        env_file = str(Path(__file__).resolve().parents[1] / ".env")
        case_sensitive = True
        extra = "ignore"

# Global settings instance
settings = Settings()
