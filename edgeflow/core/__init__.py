"""Core module for the EdgeFlow engine - config, exceptions, and dependencies."""

from .config import settings, Settings, get_settings
from .exceptions import (
    WorkflowEngineError,
    WorkflowNotFoundError,
    ExecutionNotFoundError,
    InvalidWorkflowError,
    CyclicWorkflowError,
    UnknownNodeTypeError,
    ExecutorError,
    ExpressionError,
    AICompletionError,
    WebhookError,
    WebhookAuthError,
    UnsupportedActionError,
)

__all__ = [
    # Config
    "settings",
    "Settings",
    "get_settings",
    # Exceptions
    "WorkflowEngineError",
    "WorkflowNotFoundError",
    "ExecutionNotFoundError",
    "InvalidWorkflowError",
    "CyclicWorkflowError",
    "UnknownNodeTypeError",
    "ExecutorError",
    "ExpressionError",
    "AICompletionError",
    "WebhookError",
    "WebhookAuthError",
    "UnsupportedActionError",
]
