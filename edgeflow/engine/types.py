"""Core type definitions for the workflow engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Callable, Mapping

if TYPE_CHECKING:
    import httpx

    from ..services.email_service import EmailSender
    from ..storage.cache_store import CacheStore
    from ..storage.kv_store import KVStore
    from .llm_provider import CompletionClient


META_KEY = "_meta"


class NodeType(str, Enum):
    """Built-in node type tags."""

    # Triggers
    WEBHOOK = "WEBHOOK"
    SCHEDULE = "SCHEDULE"
    GEO_TRIGGER = "GEO_TRIGGER"
    # Data processing
    TRANSFORM = "TRANSFORM"
    FILTER = "FILTER"
    MERGE = "MERGE"
    # AI
    AI_ANALYZE = "AI_ANALYZE"
    AI_GENERATE = "AI_GENERATE"
    AI_CLASSIFY = "AI_CLASSIFY"
    # Edge capabilities
    EDGE_CACHE = "EDGE_CACHE"
    EDGE_KV = "EDGE_KV"
    EDGE_REDIRECT = "EDGE_REDIRECT"
    # Output actions
    HTTP_REQUEST = "HTTP_REQUEST"
    EMAIL = "EMAIL"
    RESPONSE = "RESPONSE"


class RunState(str, Enum):
    """Lifecycle of a single workflow run."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class RunControl(str, Enum):
    """Signal returned by an executor alongside its data."""

    CONTINUE = "continue"
    TERMINATE = "terminate"


class LogStatus(str, Enum):
    """Per-node lifecycle events recorded in the run log."""

    STARTED = "started"
    COMPLETED = "completed"
    FAILED = "failed"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# --- Workflow Schema Types ---


@dataclass(frozen=True)
class NodeDefinition:
    """Definition of a node in a workflow."""

    id: str
    node_type: str
    name: str = ""
    config: dict[str, Any] = field(default_factory=dict)
    position: dict[str, float] | None = None

    @property
    def display_name(self) -> str:
        return self.name or self.id


@dataclass(frozen=True)
class Connection:
    """Directed edge: source runs before target."""

    source: str
    target: str


@dataclass(frozen=True)
class Workflow:
    """Workflow definition."""

    name: str
    nodes: list[NodeDefinition]
    connections: list[Connection] = field(default_factory=list)
    id: str | None = None

    def get_node(self, node_id: str) -> NodeDefinition | None:
        return next((n for n in self.nodes if n.id == node_id), None)


# --- Execution Types ---


@dataclass
class NodeResult:
    """Data produced by one executor plus its run-control signal."""

    data: dict[str, Any]
    control: RunControl = RunControl.CONTINUE

    @property
    def terminates(self) -> bool:
        return self.control is RunControl.TERMINATE


@dataclass(frozen=True)
class LogEntry:
    """One lifecycle event of one node."""

    node_id: str
    node_name: str
    status: LogStatus
    timestamp: datetime = field(default_factory=utc_now)
    result: dict[str, Any] | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        entry: dict[str, Any] = {
            "nodeId": self.node_id,
            "nodeName": self.node_name,
            "status": self.status.value,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.result is not None:
            entry["result"] = self.result
        if self.error is not None:
            entry["error"] = self.error
        return entry


@dataclass
class NodeServices:
    """External collaborators handed to executors.

    Created by the caller and injected into the runner; the engine never
    builds these itself.
    """

    cache: CacheStore | None = None
    kv: KVStore | None = None
    ai: CompletionClient | None = None
    email: EmailSender | None = None
    http_client: httpx.AsyncClient | None = None


@dataclass
class ExecutionContext:
    """Mutable state of a single workflow run."""

    execution_id: str
    workflow: Workflow
    trigger_data: dict[str, Any]
    services: NodeServices
    start_time: datetime = field(default_factory=utc_now)
    data: dict[str, Any] = field(default_factory=dict)
    results: dict[str, dict[str, Any]] = field(default_factory=dict)
    logs: list[LogEntry] = field(default_factory=list)

    def view(self) -> ContextView:
        return ContextView(self)


class ContextView:
    """Read-only window onto an execution context for executors."""

    def __init__(self, context: ExecutionContext) -> None:
        self._context = context

    @property
    def execution_id(self) -> str:
        return self._context.execution_id

    @property
    def data(self) -> Mapping[str, Any]:
        return MappingProxyType(self._context.data)

    @property
    def results(self) -> Mapping[str, dict[str, Any]]:
        return MappingProxyType(self._context.results)

    @property
    def trigger_data(self) -> Mapping[str, Any]:
        return MappingProxyType(self._context.trigger_data)

    @property
    def meta(self) -> Mapping[str, Any]:
        """Request metadata attached by the trigger adapter."""
        meta = self._context.trigger_data.get(META_KEY)
        return meta if isinstance(meta, dict) else {}

    @property
    def services(self) -> NodeServices:
        return self._context.services


@dataclass(frozen=True)
class RunRecord:
    """Final outcome of one run."""

    success: bool
    execution_id: str
    status: RunState
    duration: int
    logs: tuple[LogEntry, ...]
    results: Mapping[str, dict[str, Any]]
    final_data: Mapping[str, Any]
    started_at: datetime
    workflow_id: str | None = None
    workflow_name: str | None = None
    error: str | None = None
    error_type: str | None = None
    terminated_by: str | None = None

    @property
    def filtered_out(self) -> bool:
        """True when an executor ended the run early without failing."""
        return self.success and self.terminated_by is not None

    def to_dict(self) -> dict[str, Any]:
        """Wire shape returned to callers."""
        if not self.success:
            return {
                "success": False,
                "executionId": self.execution_id,
                "error": self.error,
                "errorType": self.error_type,
                "duration": self.duration,
                "logs": [entry.to_dict() for entry in self.logs],
            }
        record: dict[str, Any] = {
            "success": True,
            "executionId": self.execution_id,
            "duration": self.duration,
            "results": dict(self.results),
            "logs": [entry.to_dict() for entry in self.logs],
            "finalData": dict(self.final_data),
        }
        if self.terminated_by:
            record["terminatedBy"] = self.terminated_by
        return record


LogCallback = Callable[[LogEntry], None]
