import os
import logging
import httpx
from typing import Tuple, Optional, Any, Dict

from config.settings import settings

logger = logging.getLogger(__name__)


def extract_text_from_response(payload: Any) -> str:
    """
    Pull the reply text out of a chat completions payload.

    Looks at each choice in order and returns the first non-empty text: either
    a plain string content, or a list of strings / {"type": "text"} parts
    joined with newlines. Returns "" when nothing matches.
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("choices"), list):
        return ""

    for choice in payload["choices"]:
        message = choice.get("message") if isinstance(choice, dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if not content:
            continue

        if isinstance(content, list):
            parts = []
            for item in content:
                if isinstance(item, str):
                    text = item.strip()
                elif isinstance(item, dict) and item.get("type") == "text" and isinstance(item.get("text"), str):
                    text = item["text"].strip()
                else:
                    text = ""
                if text:
                    parts.append(text)
            if parts:
                return "\n".join(parts)

        if isinstance(content, str) and content.strip():
            return content.strip()

    return ""


def extract_error_message(payload: Any, response: httpx.Response) -> str:
    """Best available explanation for a failed request."""
    if isinstance(payload, dict):
        choices = payload.get("choices")
        if isinstance(choices, list) and choices:
            first = choices[0] if isinstance(choices[0], dict) else {}
            message = first.get("message")
            content = message.get("content") if isinstance(message, dict) else None
            if content:
                return str(content)

        error = payload.get("error")
        if isinstance(error, str) and error:
            return error
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])

    return response.reason_phrase or "Volcengine API request failed"


class ArkVisionService:
    """Image recognition through the Volcengine Ark vision-language chat API"""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_key = os.getenv("ARK_API_KEY")
        self.api_url = settings.ARK_API_URL
        self.model_id = settings.ARK_MODEL_ID
        self.prompt = settings.ARK_RECOGNITION_PROMPT
        self.timeout = settings.REQUEST_TIMEOUT_SECONDS
        self._transport = transport

    def build_payload(self, image_base64: str, mime_type: str) -> Dict[str, Any]:
        return {
            "model": self.model_id,
            "messages": [{
                "role": "user",
                "content": [
                    {
                        "type": "text",
                        "text": self.prompt
                    },
                    {
                        "type": "image_url",
                        "image_url": {
                            "url": f"data:{mime_type};base64,{image_base64}"
                        }
                    }
                ]
            }]
        }

    async def recognize(self, image_base64: str, mime_type: str) -> Tuple[bool, Optional[Tuple[str, Dict[str, Any]]], Optional[str]]:
        """
        Describe an image with the vision-language model.

        Returns:
            Tuple of (success, (text, raw_payload), error_message)
        """
        if not self.api_key:
            return False, None, "Ark API key not configured"

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    self.api_url,
                    json=self.build_payload(image_base64, mime_type),
                    headers=headers
                )

            if response.status_code < 200 or response.status_code >= 300:
                try:
                    error_payload = response.json()
                except ValueError:
                    error_payload = None
                return False, None, extract_error_message(error_payload, response)

            data = response.json()
            if not isinstance(data, dict):
                return False, None, "Unexpected response from Volcengine API"

            return True, (extract_text_from_response(data), data), None

        except httpx.TimeoutException:
            return False, None, "Request timeout - Volcengine API may be slow"
        except Exception:
            logger.exception("Error calling Volcengine API")
            return False, None, "Error calling Volcengine API"
