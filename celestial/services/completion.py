"""Chat-completion client for OpenAI-compatible APIs (OpenAI, OpenRouter, ...)."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)

TIMEOUT = 30.0  # seconds


class CompletionError(RuntimeError):
    """Raised when the completion API cannot produce a response.

    ``status_code`` holds the upstream HTTP status when one was received.
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class CompletionClient(ABC):
    """Narrow interface the chat handler depends on."""

    @abstractmethod
    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float,
        max_tokens: int,
    ) -> Optional[str]:
        """Return the first choice's message text, or ``None`` when absent.

        Raises:
            CompletionError: on network failure, timeout, non-2xx status or a
                malformed response body.
        """


class OpenAICompatibleClient(CompletionClient):
    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str = "https://api.openai.com/v1",
        timeout: float = TIMEOUT,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float,
        max_tokens: int,
    ) -> Optional[str]:
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.base_url}/chat/completions", json=payload, headers=headers
                )
                response.raise_for_status()
                body = response.json()
        except httpx.TimeoutException as exc:
            raise CompletionError(f"Completion request timed out after {self.timeout}s.") from exc
        except httpx.HTTPStatusError as exc:
            raise CompletionError(
                f"Completion API returned HTTP {exc.response.status_code}: {_error_message(exc.response)}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.RequestError as exc:
            raise CompletionError(f"Could not reach the completion API: {exc}") from exc
        except ValueError as exc:
            raise CompletionError("Completion API returned a body that is not valid JSON.") from exc

        return _first_choice_text(body)


def _error_message(response: httpx.Response) -> str:
    """Best-effort extraction of the upstream error message."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
        if isinstance(error, str):
            return error
    return response.text[:200]


def _first_choice_text(body: Any) -> Optional[str]:
    """Return ``choices[0].message.content`` from *body*, or ``None`` when missing."""
    if not isinstance(body, dict):
        raise CompletionError("Completion API returned an unexpected response shape.")
    choices = body.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    message = first.get("message") if isinstance(first, dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    return content if isinstance(content, str) else None
