"""Custom exceptions for the EdgeFlow engine."""

from typing import Any


class WorkflowEngineError(Exception):
    """Base exception for all workflow engine errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class WorkflowNotFoundError(WorkflowEngineError):
    """Raised when a workflow cannot be resolved."""

    def __init__(self, workflow_id: str) -> None:
        super().__init__(
            message=f"Workflow not found: {workflow_id}",
            details={"workflow_id": workflow_id},
        )
        self.workflow_id = workflow_id


class InvalidWorkflowError(WorkflowEngineError):
    """Raised when a workflow is rejected before any node runs."""

    def __init__(self, message: str = "Invalid workflow", workflow_id: str | None = None) -> None:
        super().__init__(
            message=message,
            details={"workflow_id": workflow_id} if workflow_id else {},
        )
        self.workflow_id = workflow_id


class CyclicWorkflowError(InvalidWorkflowError):
    """Raised when connections leave nodes that can never be scheduled."""

    def __init__(self, node_ids: list[str], workflow_id: str | None = None) -> None:
        super().__init__(
            message=f"Workflow contains a cycle through nodes: {', '.join(node_ids)}",
            workflow_id=workflow_id,
        )
        self.details["node_ids"] = list(node_ids)
        self.node_ids = list(node_ids)


class UnknownNodeTypeError(WorkflowEngineError):
    """Raised when no executor is registered for a node type."""

    def __init__(self, node_type: str) -> None:
        super().__init__(
            message=f'Unknown node type: "{node_type}"',
            details={"node_type": node_type},
        )
        self.node_type = node_type


class ExecutorError(WorkflowEngineError):
    """Raised when a node executor fails."""

    def __init__(self, message: str, node_id: str | None = None) -> None:
        super().__init__(
            message=message,
            details={"node_id": node_id} if node_id else {},
        )
        self.node_id = node_id


class ExpressionError(ExecutorError):
    """Raised when a TRANSFORM or FILTER expression cannot be evaluated."""

    def __init__(self, message: str, expression: str, node_id: str | None = None) -> None:
        super().__init__(message=message, node_id=node_id)
        self.details["expression"] = expression
        self.expression = expression


class AICompletionError(ExecutorError):
    """Raised when the AI completion endpoint fails or answers malformed data."""


class WebhookError(WorkflowEngineError):
    """Raised when webhook handling fails."""

    def __init__(self, message: str, webhook_id: str) -> None:
        super().__init__(
            message=message,
            details={"webhook_id": webhook_id},
        )
        self.webhook_id = webhook_id


class WebhookAuthError(WebhookError):
    """Raised when a webhook requires a bearer token that was not supplied."""

    def __init__(self, webhook_id: str) -> None:
        super().__init__(f"Unauthorized webhook call: {webhook_id}", webhook_id)


class ExecutionNotFoundError(WorkflowEngineError):
    """Raised when an execution record cannot be found."""

    def __init__(self, execution_id: str) -> None:
        super().__init__(
            message=f"Execution not found: {execution_id}",
            details={"execution_id": execution_id},
        )
        self.execution_id = execution_id


class UnsupportedActionError(WorkflowEngineError):
    """Raised when an edge API call names an action it does not support."""

    def __init__(self, action: str, supported: tuple[str, ...]) -> None:
        super().__init__(
            message=f'Unsupported action "{action}"; expected one of: {", ".join(supported)}',
            details={"action": action, "supported": list(supported)},
        )
        self.action = action
