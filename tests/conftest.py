"""Shared fixtures: in-memory collaborators, a fake clock and a fake AI endpoint."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from edgeflow.engine.llm_provider import CompletionClient
from edgeflow.engine.node_registry import NodeRegistry, register_builtin_nodes
from edgeflow.engine.types import NodeServices
from edgeflow.engine.workflow_runner import WorkflowRunner
from edgeflow.services.email_service import LoggingEmailSender
from edgeflow.storage.cache_store import InMemoryCacheStore
from edgeflow.storage.kv_store import InMemoryKVStore

from helpers import completion_body


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeCompletionEndpoint:
    """Records chat-completion requests and answers with queued replies."""

    def __init__(self) -> None:
        self.requests: list[dict[str, Any]] = []
        self.replies: list[Any] = ["ok"]
        self.status_code = 200

    def reply(self, *contents: Any) -> None:
        self.replies = list(contents)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(json.loads(request.content))
        if self.status_code >= 400:
            return httpx.Response(self.status_code, json={"error": {"message": "upstream failure"}})
        content = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        return httpx.Response(200, json=completion_body(content))

    @property
    def last_prompt(self) -> str:
        return self.requests[-1]["messages"][-1]["content"]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache_store(clock: FakeClock) -> InMemoryCacheStore:
    return InMemoryCacheStore(clock=clock)


@pytest.fixture
def kv_store(clock: FakeClock) -> InMemoryKVStore:
    return InMemoryKVStore(clock=clock)


@pytest.fixture
def ai_endpoint() -> FakeCompletionEndpoint:
    return FakeCompletionEndpoint()


@pytest.fixture
def ai_client(ai_endpoint: FakeCompletionEndpoint) -> CompletionClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(ai_endpoint.handler))
    return CompletionClient(
        api_key="test-key",
        base_url="https://ai.test/v1",
        default_model="qwen-turbo",
        system_prompt="You are a test assistant.",
        http_client=http_client,
    )


@pytest.fixture
def email_sender() -> LoggingEmailSender:
    return LoggingEmailSender()


@pytest.fixture
def services(
    cache_store: InMemoryCacheStore,
    kv_store: InMemoryKVStore,
    ai_client: CompletionClient,
    email_sender: LoggingEmailSender,
) -> NodeServices:
    return NodeServices(cache=cache_store, kv=kv_store, ai=ai_client, email=email_sender)


@pytest.fixture
def registry() -> NodeRegistry:
    return register_builtin_nodes(NodeRegistry())


@pytest.fixture
def run_workflow(registry: NodeRegistry, services: NodeServices):
    """Run a workflow on a fresh runner wired to the test collaborators."""

    async def _run(workflow, trigger_data=None, **kwargs):
        runner = WorkflowRunner(registry=registry, services=services, **kwargs)
        return await runner.run(workflow, trigger_data)

    return _run
