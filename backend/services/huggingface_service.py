import httpx
from typing import Tuple, Optional, List, Dict, Any

from config.settings import settings
from core.hf import HuggingFaceClient, get_hf_client
from models.processing import GenerationOptions
from models.recognition import LabelScore


def _error_from_response(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = None

    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, str) and error:
            return error
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])

    return f"Inference request failed: {response.status_code}"


def parse_labels(payload: Any) -> List[LabelScore]:
    """Turn a classification payload into labels sorted by score, highest first."""
    if not isinstance(payload, list):
        raise ValueError("Classification response is not a list")

    # Some pipelines wrap the list once more
    if payload and isinstance(payload[0], list):
        payload = payload[0]

    labels = [
        LabelScore(label=str(item["label"]), score=float(item["score"]))
        for item in payload
        if isinstance(item, dict) and "label" in item and "score" in item
    ]
    return sorted(labels, key=lambda item: item.score, reverse=True)


def build_generation_payload(options: GenerationOptions) -> Dict[str, Any]:
    parameters = {
        "negative_prompt": options.negative_prompt,
        "num_inference_steps": options.steps,
        "guidance_scale": options.guidance,
        "seed": options.seed,
    }
    payload: Dict[str, Any] = {"inputs": options.prompt}
    parameters = {key: value for key, value in parameters.items() if value is not None}
    if parameters:
        payload["parameters"] = parameters
    return payload


class HuggingFaceService:
    """Image classification and text-to-image through Hugging Face inference"""

    def __init__(self, client: Optional[HuggingFaceClient] = None):
        self._client = client
        self.default_classification_model = settings.HF_CLASSIFICATION_MODEL
        self.default_generation_model = settings.HF_GENERATION_MODEL

    @property
    def client(self) -> HuggingFaceClient:
        # Raises ConfigurationError when the credential is missing
        return self._client or get_hf_client()

    async def classify_image(self, data: bytes, mime_type: str, model: str) -> Tuple[bool, Optional[List[LabelScore]], Optional[str]]:
        """
        Classify an image with a hosted model.

        Returns:
            Tuple of (success, labels, error_message)
        """
        client = self.client
        try:
            response = await client.post_bytes(model, data, mime_type)
            if response.status_code != 200:
                return False, None, _error_from_response(response)

            return True, parse_labels(response.json()), None

        except httpx.TimeoutException:
            return False, None, "Request timeout - inference API may be slow"
        except Exception as error:
            return False, None, f"Error calling inference API: {str(error)}"

    async def text_to_image(self, options: GenerationOptions) -> Tuple[bool, Optional[bytes], Optional[str]]:
        """
        Generate an image from a prompt.

        Returns:
            Tuple of (success, image_bytes, error_message)
        """
        client = self.client
        try:
            response = await client.post_json(
                options.model,
                build_generation_payload(options),
                accept="image/png"
            )
            if response.status_code != 200:
                return False, None, _error_from_response(response)

            content_type = response.headers.get("content-type", "")
            if not content_type.startswith("image/"):
                return False, None, f"Unexpected content type from inference API: {content_type or 'none'}"

            if not response.content:
                return False, None, "No image received from inference API"

            return True, response.content, None

        except httpx.TimeoutException:
            return False, None, "Request timeout - inference API may be slow"
        except Exception as error:
            return False, None, f"Error calling inference API: {str(error)}"
