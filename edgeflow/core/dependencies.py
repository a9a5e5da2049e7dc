"""FastAPI dependency injection for the EdgeFlow engine."""

from __future__ import annotations

from functools import lru_cache

import httpx
from fastapi import Depends

from .config import settings


# --- Engine Dependencies ---


@lru_cache
def get_node_registry():
    """Get node registry instance with the built-in nodes registered."""
    from ..engine.node_registry import register_builtin_nodes

    return register_builtin_nodes()


@lru_cache
def get_node_services():
    """Get the process-wide collaborators handed to executors."""
    from ..engine.llm_provider import CompletionClient
    from ..engine.types import NodeServices
    from ..services.email_service import LoggingEmailSender
    from ..storage.cache_store import InMemoryCacheStore
    from ..storage.kv_store import InMemoryKVStore

    http_client = httpx.AsyncClient(timeout=settings.http_timeout)
    return NodeServices(
        cache=InMemoryCacheStore(),
        kv=InMemoryKVStore(),
        ai=CompletionClient.from_settings(settings, http_client=http_client),
        email=LoggingEmailSender(),
        http_client=http_client,
    )


# --- Storage Dependencies ---


@lru_cache
def get_workflow_store():
    """Get workflow store instance."""
    from ..storage.workflow_store import WorkflowStore

    return WorkflowStore()


@lru_cache
def get_execution_store():
    """Get execution store instance."""
    from ..storage.execution_store import ExecutionStore

    return ExecutionStore(max_records=settings.max_execution_records)


# --- Service Dependencies ---


def get_execution_service(
    registry=Depends(get_node_registry),
    services=Depends(get_node_services),
    execution_store=Depends(get_execution_store),
):
    """Get execution service instance."""
    from ..services.execution_service import ExecutionService

    return ExecutionService(
        registry, services, execution_store, reject_cycles=settings.reject_cycles
    )


def get_webhook_service(
    workflow_store=Depends(get_workflow_store),
    execution_service=Depends(get_execution_service),
):
    """Get webhook service instance."""
    from ..services.webhook_service import WebhookService

    return WebhookService(workflow_store, execution_service)


def get_schedule_service(
    workflow_store=Depends(get_workflow_store),
    execution_service=Depends(get_execution_service),
):
    """Get schedule service instance."""
    from ..services.schedule_service import ScheduleService

    return ScheduleService(workflow_store, execution_service)


def get_node_service(
    node_registry=Depends(get_node_registry),
):
    """Get node service instance."""
    from ..services.node_service import NodeService

    return NodeService(node_registry)


def get_kv_service(
    services=Depends(get_node_services),
):
    """Get KV service instance over the shared KV store."""
    from ..services.kv_service import KVService

    return KVService(services.kv)


def get_ai_service(
    services=Depends(get_node_services),
):
    """Get AI service instance over the shared completion client."""
    from ..services.ai_service import AIService

    return AIService(services.ai)


async def close_node_services() -> None:
    """Close the shared HTTP client and drop the cached collaborators."""
    if get_node_services.cache_info().currsize:
        services = get_node_services()
        if services.http_client is not None:
            await services.http_client.aclose()
    get_node_services.cache_clear()
