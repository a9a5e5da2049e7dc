"""Core workflow engine components."""

from .types import (
    NodeType,
    NodeDefinition,
    Connection,
    Workflow,
    NodeResult,
    RunControl,
    RunState,
    LogEntry,
    LogStatus,
    NodeServices,
    ExecutionContext,
    ContextView,
    RunRecord,
)
from .expression_engine import ExpressionEngine, expression_engine
from .graph import build_execution_order, find_unordered_nodes
from .node_registry import NodeRegistry, node_registry, register_builtin_nodes
from .workflow_runner import WorkflowRunner

__all__ = [
    "NodeType",
    "NodeDefinition",
    "Connection",
    "Workflow",
    "NodeResult",
    "RunControl",
    "RunState",
    "LogEntry",
    "LogStatus",
    "NodeServices",
    "ExecutionContext",
    "ContextView",
    "RunRecord",
    "ExpressionEngine",
    "expression_engine",
    "build_execution_order",
    "find_unordered_nodes",
    "NodeRegistry",
    "node_registry",
    "register_builtin_nodes",
    "WorkflowRunner",
]
