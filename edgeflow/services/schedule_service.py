"""Schedule service - fires workflows from timer ticks."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any

from ..core.exceptions import WorkflowNotFoundError
from ..engine.types import META_KEY, NodeType, utc_now

if TYPE_CHECKING:
    from ..engine.types import RunRecord, Workflow
    from ..storage.workflow_store import WorkflowStore
    from .execution_service import ExecutionService

logger = logging.getLogger(__name__)


class ScheduleService:
    """Runs stored workflows for an external timer.

    Cron parsing and timing belong to the caller; ``fire`` is called once
    per tick.
    """

    def __init__(self, workflow_store: WorkflowStore, execution_service: ExecutionService) -> None:
        self._workflow_store = workflow_store
        self._execution_service = execution_service

    def build_trigger_data(self, workflow: Workflow, scheduled_time: datetime | None = None) -> dict[str, Any]:
        schedule_node = next(
            (n for n in workflow.nodes if n.node_type == NodeType.SCHEDULE.value),
            None,
        )
        config = schedule_node.config if schedule_node else {}
        return {
            META_KEY: {
                "trigger": "schedule",
                "cron": config.get("cron", "0 * * * *"),
                "timezone": config.get("timezone", "UTC"),
                "scheduledTime": (scheduled_time or utc_now()).isoformat(),
            }
        }

    async def fire(self, workflow_id: str, scheduled_time: datetime | None = None) -> RunRecord:
        """Run a stored workflow for one timer tick.

        Raises:
            WorkflowNotFoundError: If the workflow does not exist.
        """
        workflow = self._workflow_store.get(workflow_id)
        if workflow is None:
            raise WorkflowNotFoundError(workflow_id)

        logger.info("Scheduled run of workflow %s", workflow_id)
        trigger_data = self.build_trigger_data(workflow, scheduled_time)
        return await self._execution_service.execute(workflow, trigger_data)
