"""Tests for the chat-completion client."""

from __future__ import annotations

import httpx
import pytest

from edgeflow.core.config import Settings
from edgeflow.core.exceptions import AICompletionError
from edgeflow.engine.llm_provider import CompletionClient


def make_client(handler, api_key: str | None = "test-key", **kwargs) -> CompletionClient:
    return CompletionClient(
        api_key=api_key,
        base_url="https://ai.test/v1",
        default_model="qwen-turbo",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        **kwargs,
    )


class TestBuildMessages:
    def test_system_prompt_first(self):
        client = make_client(None, system_prompt="Be brief.")
        assert client.build_messages("hi") == [
            {"role": "system", "content": "Be brief."},
            {"role": "user", "content": "hi"},
        ]

    def test_no_system_prompt(self):
        client = make_client(None)
        assert client.build_messages("hi") == [{"role": "user", "content": "hi"}]

    def test_override_system_prompt(self):
        client = make_client(None, system_prompt="default")
        assert client.build_messages("hi", system_prompt="other")[0]["content"] == "other"


class TestComplete:
    async def test_request_shape(self, ai_endpoint, ai_client):
        ai_endpoint.reply("hello")

        answer = await ai_client.complete("Say hello")

        assert answer == "hello"
        payload = ai_endpoint.requests[0]
        assert payload["model"] == "qwen-turbo"
        assert payload["max_tokens"] == 2000
        assert payload["temperature"] == 0.7
        assert payload["messages"][-1] == {"role": "user", "content": "Say hello"}

    async def test_sends_bearer_key(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={
                "id": "x", "object": "chat.completion", "created": 0, "model": "m",
                "choices": [{"index": 0, "message": {"role": "assistant", "content": "ok"}, "finish_reason": "stop"}],
            })

        await make_client(handler).complete("hi")

        assert seen[0].headers["authorization"] == "Bearer test-key"
        assert seen[0].url.path == "/v1/chat/completions"

    async def test_missing_api_key(self):
        client = make_client(None, api_key=None)
        with pytest.raises(AICompletionError, match="API key"):
            await client.complete("hi")

    async def test_unauthorized(self, ai_endpoint, ai_client):
        ai_endpoint.status_code = 401
        with pytest.raises(AICompletionError, match="AI completion failed"):
            await ai_client.complete("hi")

    async def test_empty_choices(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={
                "id": "x", "object": "chat.completion", "created": 0, "model": "m", "choices": [],
            })

        with pytest.raises(AICompletionError, match="no choices"):
            await make_client(handler).complete("hi")

    async def test_null_content(self, ai_endpoint, ai_client):
        ai_endpoint.reply(None)
        with pytest.raises(AICompletionError, match="malformed"):
            await ai_client.complete("hi")


class TestFromSettings:
    def test_uses_configured_defaults(self):
        settings = Settings(ai_api_key="k", ai_model="qwen-plus", ai_max_tokens=500, ai_temperature=0.2)

        client = CompletionClient.from_settings(settings)

        assert client.default_model == "qwen-plus"
        assert client.max_tokens == 500
        assert client.temperature == 0.2
        assert client.system_prompt == settings.ai_system_prompt
