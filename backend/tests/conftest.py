"""
Shared pytest fixtures and configuration for all tests
"""
import io
import pytest
import sys
from pathlib import Path

from PIL import Image

# Add backend to Python path for imports
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Imported up front so .env loading runs before credentials are cleared per test
from main import app  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_credentials(monkeypatch):
    """Start every test without backend credentials or a cached inference client"""
    monkeypatch.delenv("ARK_API_KEY", raising=False)
    monkeypatch.delenv("HUGGING_FACE_API_KEY", raising=False)

    from core import hf
    monkeypatch.setattr(hf, "_cached_client", None)


@pytest.fixture
def client():
    """Provide FastAPI test client"""
    from fastapi.testclient import TestClient
    return TestClient(app)


def make_image_bytes(fmt="JPEG", size=(64, 48), mode="RGB", color=(200, 80, 40)):
    image = Image.new(mode, size, color)
    buffer = io.BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def jpeg_bytes():
    """A small solid-colour JPEG"""
    return make_image_bytes("JPEG")


@pytest.fixture
def png_rgba_bytes():
    """A PNG with a half-transparent alpha channel"""
    return make_image_bytes("PNG", size=(40, 40), mode="RGBA", color=(10, 120, 200, 128))


@pytest.fixture
def noisy_jpeg_bytes():
    """A 400x200 noisy photo-like JPEG that compresses differently per quality"""
    noise = Image.effect_noise((400, 200), 64).convert("RGB")
    buffer = io.BytesIO()
    noise.save(buffer, format="JPEG", quality=95)
    return buffer.getvalue()
