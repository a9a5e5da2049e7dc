"""Chat-completion client for the AI nodes.

Talks to any OpenAI-compatible endpoint (DashScope compatible mode by
default) through the openai SDK:

    POST {base_url}/chat/completions
    Authorization: Bearer <api key>
    {"model", "messages": [{"role", "content"}], "max_tokens", "temperature"}

Any non-2xx answer, transport error or response without
``choices[0].message.content`` is raised as ``AICompletionError``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx
from openai import APIError, AsyncOpenAI

from ..core.exceptions import AICompletionError

if TYPE_CHECKING:
    from ..core.config import Settings

logger = logging.getLogger(__name__)


class CompletionClient:
    """Chat-completion client with a lazily built SDK client."""

    def __init__(
        self,
        api_key: str | None,
        base_url: str,
        default_model: str,
        max_tokens: int = 2000,
        temperature: float = 0.7,
        system_prompt: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url
        self.default_model = default_model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.system_prompt = system_prompt
        self._http_client = http_client
        self._client: AsyncOpenAI | None = None

    @classmethod
    def from_settings(
        cls, settings: Settings, http_client: httpx.AsyncClient | None = None
    ) -> CompletionClient:
        return cls(
            api_key=settings.ai_api_key,
            base_url=settings.ai_base_url,
            default_model=settings.ai_model,
            max_tokens=settings.ai_max_tokens,
            temperature=settings.ai_temperature,
            system_prompt=settings.ai_system_prompt,
            http_client=http_client,
        )

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self._api_key:
                raise AICompletionError("AI API key is not configured")
            # Failed calls are not retried; the run fails at the calling node
            self._client = AsyncOpenAI(
                api_key=self._api_key,
                base_url=self._base_url,
                max_retries=0,
                http_client=self._http_client,
            )
        return self._client

    def build_messages(self, prompt: str, system_prompt: str | None = None) -> list[dict[str, str]]:
        messages: list[dict[str, str]] = []
        system = system_prompt if system_prompt is not None else self.system_prompt
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})
        return messages

    async def complete(
        self,
        prompt: str,
        model: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
        system_prompt: str | None = None,
    ) -> str:
        """Send one user prompt and return the assistant's text."""
        client = self._get_client()
        model = model or self.default_model

        try:
            response = await client.chat.completions.create(
                model=model,
                messages=self.build_messages(prompt, system_prompt),  # type: ignore[arg-type]
                max_tokens=max_tokens or self.max_tokens,
                temperature=self.temperature if temperature is None else temperature,
            )
        except APIError as e:
            logger.warning("AI completion request failed (model=%s): %s", model, e)
            raise AICompletionError(f"AI completion failed: {e}") from e
        except ValueError as e:
            raise AICompletionError(f"AI completion returned an unreadable body: {e}") from e

        return self._extract_content(response)

    def _extract_content(self, response: Any) -> str:
        choices = getattr(response, "choices", None)
        if not choices:
            raise AICompletionError("AI completion returned no choices")

        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None)
        if not isinstance(content, str):
            raise AICompletionError("AI completion returned a malformed message")
        return content
