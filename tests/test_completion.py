"""Tests for celestial.services.completion.OpenAICompatibleClient.

The HTTP layer is replaced by patching ``httpx.AsyncClient.post`` so no
network access is needed.
"""

import asyncio
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from celestial.services.completion import CompletionError, OpenAICompatibleClient

_URL = "https://llm.example/v1/chat/completions"


def _response(status_code: int = 200, **kwargs) -> httpx.Response:
    return httpx.Response(status_code, request=httpx.Request("POST", _URL), **kwargs)


def _client() -> OpenAICompatibleClient:
    return OpenAICompatibleClient(
        api_key="sk-test", model="test-model", base_url="https://llm.example/v1/", timeout=5
    )


def _complete(client: OpenAICompatibleClient):
    return asyncio.run(
        client.complete("system text", "user text", temperature=0.2, max_tokens=1000)
    )


class TestCompleteSuccess:
    def test_returns_first_choice_content(self):
        body = {"choices": [{"message": {"role": "assistant", "content": "  The answer.  "}}]}
        with patch.object(httpx.AsyncClient, "post", new=AsyncMock(return_value=_response(json=body))):
            assert _complete(_client()) == "  The answer.  "

    def test_sends_openai_wire_format(self):
        body = {"choices": [{"message": {"content": "ok"}}]}
        mock_post = AsyncMock(return_value=_response(json=body))
        with patch.object(httpx.AsyncClient, "post", new=mock_post):
            _complete(_client())

        args, kwargs = mock_post.call_args
        assert args[0] == _URL
        assert kwargs["headers"]["Authorization"] == "Bearer sk-test"
        payload = kwargs["json"]
        assert payload["model"] == "test-model"
        assert payload["temperature"] == 0.2
        assert payload["max_tokens"] == 1000
        assert payload["messages"] == [
            {"role": "system", "content": "system text"},
            {"role": "user", "content": "user text"},
        ]

    def test_missing_choices_returns_none(self):
        with patch.object(httpx.AsyncClient, "post", new=AsyncMock(return_value=_response(json={"choices": []}))):
            assert _complete(_client()) is None

    def test_null_content_returns_none(self):
        body = {"choices": [{"message": {"content": None}}]}
        with patch.object(httpx.AsyncClient, "post", new=AsyncMock(return_value=_response(json=body))):
            assert _complete(_client()) is None


class TestCompleteErrors:
    def test_http_error_carries_status_and_message(self):
        resp = _response(401, json={"error": {"message": "Invalid API key"}})
        with patch.object(httpx.AsyncClient, "post", new=AsyncMock(return_value=resp)):
            with pytest.raises(CompletionError) as excinfo:
                _complete(_client())

        assert excinfo.value.status_code == 401
        assert "Invalid API key" in str(excinfo.value)

    def test_timeout_raises_completion_error(self):
        with patch.object(
            httpx.AsyncClient, "post", new=AsyncMock(side_effect=httpx.ReadTimeout("timed out"))
        ):
            with pytest.raises(CompletionError, match="timed out"):
                _complete(_client())

    def test_connection_error_raises_completion_error(self):
        with patch.object(
            httpx.AsyncClient, "post", new=AsyncMock(side_effect=httpx.ConnectError("refused"))
        ):
            with pytest.raises(CompletionError) as excinfo:
                _complete(_client())

        assert excinfo.value.status_code is None

    def test_non_json_body_raises_completion_error(self):
        with patch.object(
            httpx.AsyncClient, "post", new=AsyncMock(return_value=_response(text="<html>oops</html>"))
        ):
            with pytest.raises(CompletionError, match="not valid JSON"):
                _complete(_client())

    def test_non_object_body_raises_completion_error(self):
        with patch.object(httpx.AsyncClient, "post", new=AsyncMock(return_value=_response(json=["x"]))):
            with pytest.raises(CompletionError, match="unexpected response shape"):
                _complete(_client())
