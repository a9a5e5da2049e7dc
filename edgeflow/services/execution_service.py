"""Execution service - runs workflows and keeps their history."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ..core.exceptions import ExecutionNotFoundError
from ..engine.workflow_runner import WorkflowRunner

if TYPE_CHECKING:
    from ..engine.node_registry import NodeRegistry
    from ..engine.types import LogCallback, NodeServices, RunRecord, Workflow
    from ..storage.execution_store import ExecutionStore

logger = logging.getLogger(__name__)


class ExecutionService:
    """Service for execution operations."""

    def __init__(
        self,
        registry: NodeRegistry,
        services: NodeServices,
        execution_store: ExecutionStore,
        reject_cycles: bool = True,
    ) -> None:
        self._registry = registry
        self._services = services
        self._execution_store = execution_store
        self._reject_cycles = reject_cycles

    async def execute(
        self,
        workflow: Workflow,
        trigger_data: dict[str, Any] | None = None,
        on_log: LogCallback | None = None,
    ) -> RunRecord:
        """Run a workflow once and record the outcome.

        Raises:
            InvalidWorkflowError: If the workflow is rejected before running.
        """
        runner = WorkflowRunner(
            registry=self._registry,
            services=self._services,
            reject_cycles=self._reject_cycles,
            on_log=on_log,
        )
        record = await runner.run(workflow, trigger_data)
        self._execution_store.add(record)

        if not record.success:
            logger.info("Execution %s failed: %s", record.execution_id, record.error)
        return record

    def list_executions(self, workflow_id: str | None = None) -> list[dict[str, Any]]:
        """List execution history, newest first."""
        return [
            {
                "id": r.execution_id,
                "workflowId": r.workflow_id,
                "workflowName": r.workflow_name,
                "status": r.status.value,
                "startTime": r.started_at.isoformat(),
                "duration": r.duration,
                "nodesExecuted": len(r.results),
                "error": r.error,
            }
            for r in self._execution_store.list(workflow_id)
        ]

    def get_execution(self, execution_id: str) -> RunRecord:
        """Get a run record."""
        record = self._execution_store.get(execution_id)
        if record is None:
            raise ExecutionNotFoundError(execution_id)
        return record

    def clear_executions(self) -> int:
        """Clear all execution records and return count."""
        count = len(self._execution_store)
        self._execution_store.clear()
        return count
