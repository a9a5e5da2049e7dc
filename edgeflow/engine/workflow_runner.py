"""
Workflow runner - executes one workflow run in topological order.

Nodes run sequentially. Each executor sees a read-only view of the shared
context; its result is stored under its node id and shallow-merged into the
accumulated data before the next node runs.
"""

from __future__ import annotations

import logging
import secrets
import time
from typing import TYPE_CHECKING, Any

from ..core.exceptions import CyclicWorkflowError, InvalidWorkflowError
from .graph import build_execution_order, find_unordered_nodes
from .types import (
    ExecutionContext,
    LogCallback,
    LogEntry,
    LogStatus,
    NodeServices,
    RunRecord,
    RunState,
    Workflow,
)

if TYPE_CHECKING:
    from .node_registry import NodeRegistry
    from .types import NodeDefinition

logger = logging.getLogger(__name__)


def new_execution_id() -> str:
    return f"exec-{int(time.time() * 1000)}-{secrets.token_hex(4)[:7]}"


class WorkflowRunner:
    """Executes a single workflow run: PENDING -> RUNNING -> COMPLETED | FAILED."""

    def __init__(
        self,
        registry: NodeRegistry | None = None,
        services: NodeServices | None = None,
        reject_cycles: bool = True,
        on_log: LogCallback | None = None,
    ) -> None:
        if registry is None:
            from .node_registry import node_registry
            registry = node_registry
        self._registry: NodeRegistry = registry
        self._services = services or NodeServices()
        self._reject_cycles = reject_cycles
        self._on_log = on_log
        self.state = RunState.PENDING

    async def run(
        self,
        workflow: Workflow,
        trigger_data: dict[str, Any] | None = None,
    ) -> RunRecord:
        """
        Run a workflow once.

        Args:
            workflow: The workflow definition to execute
            trigger_data: Initial context data supplied by the trigger adapter

        Returns:
            RunRecord describing the outcome. Executor failures are recorded
            in the record, never raised.

        Raises:
            InvalidWorkflowError: If the workflow has no nodes, or has a cycle
                while cycles are rejected. No node runs in that case.
            RuntimeError: If this runner was already used.
        """
        if self.state is not RunState.PENDING:
            raise RuntimeError("WorkflowRunner instances run a single workflow once")

        if workflow is None or not workflow.nodes:
            raise InvalidWorkflowError("Workflow has no nodes", workflow_id=getattr(workflow, "id", None))

        order = self._resolve_order(workflow)

        trigger_data = dict(trigger_data or {})
        context = ExecutionContext(
            execution_id=new_execution_id(),
            workflow=workflow,
            trigger_data=trigger_data,
            services=self._services,
            data=dict(trigger_data),
        )
        started = time.monotonic()
        self.state = RunState.RUNNING
        logger.info(
            "Run %s started for workflow %s (%d nodes)",
            context.execution_id, workflow.id or workflow.name, len(order),
        )

        terminated_by: str | None = None
        current: NodeDefinition | None = None
        try:
            for node_id in order:
                node = workflow.get_node(node_id)
                if node is None:
                    continue
                current = node

                self._log(context, LogEntry(node.id, node.display_name, LogStatus.STARTED))

                executor = self._registry.get(node.node_type)
                result = await executor.execute(node, context.view())

                context.results[node.id] = result.data
                context.data.update(result.data)
                self._log(
                    context,
                    LogEntry(node.id, node.display_name, LogStatus.COMPLETED, result=result.data),
                )

                if result.terminates:
                    terminated_by = node.id
                    logger.info("Run %s stopped early at node %s", context.execution_id, node.id)
                    break
        except Exception as e:
            self.state = RunState.FAILED
            message = getattr(e, "message", None) or str(e) or type(e).__name__
            if current is not None:
                logger.warning(
                    "Run %s failed at node %s (%s): %s",
                    context.execution_id, current.id, current.node_type, message,
                )
                self._log(
                    context,
                    LogEntry(current.id, current.display_name, LogStatus.FAILED, error=message),
                )
            return self._record(
                context, workflow, started, success=False, error=message, error_type=type(e).__name__
            )

        self.state = RunState.COMPLETED
        record = self._record(context, workflow, started, success=True, terminated_by=terminated_by)
        logger.info("Run %s completed in %dms", context.execution_id, record.duration)
        return record

    def _resolve_order(self, workflow: Workflow) -> list[str]:
        known = {node.id for node in workflow.nodes}
        order = [node_id for node_id in build_execution_order(workflow) if node_id in known]

        skipped = find_unordered_nodes(workflow, order)
        if skipped:
            if self._reject_cycles:
                raise CyclicWorkflowError(skipped, workflow_id=workflow.id)
            logger.warning(
                "Workflow %s: nodes on a cycle will not run: %s",
                workflow.id or workflow.name, ", ".join(skipped),
            )
        return order

    def _record(
        self,
        context: ExecutionContext,
        workflow: Workflow,
        started: float,
        success: bool,
        error: str | None = None,
        error_type: str | None = None,
        terminated_by: str | None = None,
    ) -> RunRecord:
        return RunRecord(
            success=success,
            execution_id=context.execution_id,
            status=self.state,
            duration=int((time.monotonic() - started) * 1000),
            logs=tuple(context.logs),
            results=dict(context.results),
            final_data=dict(context.data),
            started_at=context.start_time,
            workflow_id=workflow.id,
            workflow_name=workflow.name,
            error=error,
            error_type=error_type,
            terminated_by=terminated_by,
        )

    def _log(self, context: ExecutionContext, entry: LogEntry) -> None:
        context.logs.append(entry)
        self._emit(entry)

    def _emit(self, entry: LogEntry) -> None:
        """Helper to emit log entries safely."""
        if self._on_log:
            try:
                self._on_log(entry)
            except Exception:
                logger.exception("Error in run log callback")
