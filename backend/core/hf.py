"""
Shared Hugging Face inference client.

The handle is created on first use and reused for the life of the process.
It only holds the credential and endpoint settings; every call opens its own
httpx client, so sharing it between concurrent requests is safe.
"""
import os
import logging
from typing import Any, Dict, Optional

import httpx

from config.settings import settings
from core.errors import ConfigurationError

logger = logging.getLogger(__name__)


class HuggingFaceClient:
    """Thin async wrapper around the Hugging Face inference HTTP API."""

    def __init__(
        self,
        api_key: str,
        base_url: str = settings.HF_INFERENCE_URL,
        timeout: float = settings.REQUEST_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def model_url(self, model: str) -> str:
        return f"{self.base_url}/{model}"

    def _headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {"Authorization": f"Bearer {self.api_key}"}
        if extra:
            headers.update(extra)
        return headers

    async def post_bytes(self, model: str, data: bytes, content_type: str) -> httpx.Response:
        """Send raw bytes (e.g. an image) to a model endpoint."""
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            return await client.post(
                self.model_url(model),
                content=data,
                headers=self._headers({"Content-Type": content_type}),
            )

    async def post_json(self, model: str, payload: Dict[str, Any], accept: str = "application/json") -> httpx.Response:
        """Send a JSON payload to a model endpoint."""
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            return await client.post(
                self.model_url(model),
                json=payload,
                headers=self._headers({"Accept": accept}),
            )


_cached_client: Optional[HuggingFaceClient] = None


def _ensure_api_key() -> str:
    api_key = os.getenv("HUGGING_FACE_API_KEY")
    if not api_key:
        raise ConfigurationError("HUGGING_FACE_API_KEY environment variable is missing")
    return api_key


def get_hf_client() -> HuggingFaceClient:
    """Return the process-wide client, creating it on first use."""
    global _cached_client
    if _cached_client is None:
        _cached_client = HuggingFaceClient(_ensure_api_key())
        logger.info("Initialized Hugging Face inference client for %s", _cached_client.base_url)
    return _cached_client


def is_hf_configured() -> bool:
    return _cached_client is not None or bool(os.getenv("HUGGING_FACE_API_KEY"))
