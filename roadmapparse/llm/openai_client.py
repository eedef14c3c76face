from __future__ import annotations

import time
from typing import Any, Callable, Iterator

from .base import LLMClient
from ..errors import ProviderError

_RETRYABLE_STATUS = frozenset({429, 500, 502, 503})
_RETRY_MARKERS = ("rate limit", "429", "timeout", "temporarily unavailable")


class OpenAIClient(LLMClient):
    """Chat-completions client with exponential backoff on transient failures."""

    def __init__(
        self,
        model: str,
        api_key: str | None,
        base_url: str | None = None,
        max_retries: int = 3,
        retry_backoff_seconds: float = 1.0,
    ) -> None:
        if not api_key:
            raise ProviderError("api_key is required for provider='openai'.")

        try:
            from openai import OpenAI
        except ImportError as exc:  # pragma: no cover - depends on optional package.
            raise ProviderError(
                "openai package is not installed. Install with: pip install openai"
            ) from exc

        self._client = OpenAI(api_key=api_key, base_url=base_url)
        self.model = model
        self.max_retries = max_retries
        self.retry_backoff_seconds = retry_backoff_seconds

    def complete_text(self, prompt: str, temperature: float = 0.0) -> str:
        response = self._with_retries(lambda: self._create(prompt, temperature))
        return self._extract_response_text(response)

    def stream_text(self, prompt: str, temperature: float = 0.0) -> Iterator[str]:
        stream = self._with_retries(lambda: self._create(prompt, temperature, stream=True))

        try:
            for event in stream:
                text = self._extract_delta_text(event)
                if text:
                    yield text
        except Exception as exc:  # pragma: no cover - provider specific.
            raise ProviderError(f"OpenAI stream interrupted: {exc}") from exc

    def _create(self, prompt: str, temperature: float, **options: Any) -> Any:
        return self._client.chat.completions.create(
            model=self.model,
            temperature=temperature,
            messages=[{"role": "user", "content": prompt}],
            **options,
        )

    def _with_retries(self, request: Callable[[], Any]) -> Any:
        last_attempt = self.max_retries - 1
        for attempt in range(self.max_retries):
            try:
                return request()
            except Exception as exc:
                if attempt >= last_attempt or not self._is_retryable(exc):
                    raise ProviderError(f"OpenAI request failed: {exc}") from exc
                time.sleep(self.retry_backoff_seconds * (2**attempt))

        raise ProviderError("OpenAI request failed after retries.")

    @staticmethod
    def _is_retryable(exc: Exception) -> bool:
        if getattr(exc, "status_code", None) in _RETRYABLE_STATUS:
            return True
        message = str(exc).lower()
        return any(marker in message for marker in _RETRY_MARKERS)

    @staticmethod
    def _extract_delta_text(event: Any) -> str:
        choices = getattr(event, "choices", None) or []
        if not choices:
            return ""
        content = getattr(getattr(choices[0], "delta", None), "content", None)
        return content if isinstance(content, str) else ""

    @staticmethod
    def _extract_response_text(response: Any) -> str:
        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as exc:
            raise ProviderError("OpenAI returned an unexpected response shape.") from exc

        if content is None:
            return ""
        if isinstance(content, str):
            return content
        if isinstance(content, list):
            return "".join(_content_part_text(item) for item in content)
        return str(content)


def _content_part_text(item: Any) -> str:
    if isinstance(item, str):
        return item
    if isinstance(item, dict):
        return str(item.get("text", ""))
    text = getattr(item, "text", None)
    return str(text) if text else ""
