"""
ArkVisionService tests using httpx.MockTransport in place of the remote API
"""
import json
import httpx
import pytest

from services.ark_vision_service import ArkVisionService, extract_text_from_response


def chat_reply(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


@pytest.mark.unit
class TestExtractText:

    def test_string_content(self):
        assert extract_text_from_response(chat_reply("  A cat on a sofa.  ")) == "A cat on a sofa."

    def test_text_parts_joined_with_newlines(self):
        content = [
            {"type": "text", "text": "A cat."},
            {"type": "image_url", "image_url": {"url": "ignored"}},
            "  On a sofa.  ",
            {"type": "text", "text": "   "},
        ]
        assert extract_text_from_response(chat_reply(content)) == "A cat.\nOn a sofa."

    def test_first_non_empty_choice_wins(self):
        payload = {"choices": [
            {"message": {"content": ""}},
            {"message": {"content": [{"type": "image_url"}]}},
            {"message": {"content": "second"}},
            {"message": {"content": "third"}},
        ]}
        assert extract_text_from_response(payload) == "second"

    @pytest.mark.parametrize("payload", [
        None,
        {},
        {"choices": "nope"},
        {"choices": [{}]},
        {"choices": [{"message": {"content": 42}}]},
    ])
    def test_unrecognized_shapes_yield_empty_string(self, payload):
        assert extract_text_from_response(payload) == ""


@pytest.mark.unit
@pytest.mark.asyncio
class TestArkVisionService:

    async def test_recognize_success(self, monkeypatch):
        monkeypatch.setenv("ARK_API_KEY", "ark-test-key")
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers["authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=chat_reply("A red square."))

        service = ArkVisionService(transport=httpx.MockTransport(handler))
        success, result, error = await service.recognize("QUJD", "image/png")

        assert success is True
        assert error is None
        text, raw = result
        assert text == "A red square."
        assert raw["choices"][0]["message"]["content"] == "A red square."

        assert seen["auth"] == "Bearer ark-test-key"
        content = seen["body"]["messages"][0]["content"]
        assert content[0] == {"type": "text", "text": service.prompt}
        assert content[1]["image_url"]["url"] == "data:image/png;base64,QUJD"
        assert seen["body"]["model"] == service.model_id

    async def test_backend_error_message_is_forwarded(self, monkeypatch):
        monkeypatch.setenv("ARK_API_KEY", "ark-test-key")

        def handler(request):
            return httpx.Response(400, json={"error": {"code": "InvalidParameter", "message": "image too small"}})

        service = ArkVisionService(transport=httpx.MockTransport(handler))
        success, result, error = await service.recognize("QUJD", "image/png")

        assert success is False
        assert result is None
        assert error == "image too small"

    async def test_non_json_error_uses_reason_phrase(self, monkeypatch):
        monkeypatch.setenv("ARK_API_KEY", "ark-test-key")

        def handler(request):
            return httpx.Response(502, text="<html>bad gateway</html>")

        service = ArkVisionService(transport=httpx.MockTransport(handler))
        success, _, error = await service.recognize("QUJD", "image/png")

        assert success is False
        assert error == "Bad Gateway"

    async def test_error_with_non_dict_message(self, monkeypatch):
        monkeypatch.setenv("ARK_API_KEY", "ark-test-key")

        def handler(request):
            return httpx.Response(400, json={"choices": [{"message": "oops"}], "error": "quota exceeded"})

        service = ArkVisionService(transport=httpx.MockTransport(handler))
        success, _, error = await service.recognize("QUJD", "image/png")

        assert success is False
        assert error == "quota exceeded"

    async def test_network_failure(self, monkeypatch):
        monkeypatch.setenv("ARK_API_KEY", "ark-test-key")

        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        service = ArkVisionService(transport=httpx.MockTransport(handler))
        success, _, error = await service.recognize("QUJD", "image/png")

        assert success is False
        assert error == "Error calling Volcengine API"

    async def test_missing_key_skips_request(self):
        def handler(request):
            pytest.fail("No request should be made without a key")

        service = ArkVisionService(transport=httpx.MockTransport(handler))
        success, _, error = await service.recognize("QUJD", "image/png")

        assert success is False
        assert error == "Ark API key not configured"
