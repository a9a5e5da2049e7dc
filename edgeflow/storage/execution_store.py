"""In-memory run history."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..engine.types import RunRecord


class ExecutionStore:
    """Bounded in-memory history of finished runs."""

    def __init__(self, max_records: int = 100) -> None:
        self._executions: dict[str, RunRecord] = {}
        self._max_records = max_records

    def add(self, record: RunRecord) -> RunRecord:
        """Store a finished run, evicting the oldest records over the limit."""
        self._executions[record.execution_id] = record
        self._cleanup()
        return record

    def get(self, execution_id: str) -> RunRecord | None:
        """Get a run record by ID."""
        return self._executions.get(execution_id)

    def list(self, workflow_id: str | None = None) -> list[RunRecord]:
        """List run records, newest first, optionally filtered by workflow ID."""
        records = list(self._executions.values())

        if workflow_id:
            records = [r for r in records if r.workflow_id == workflow_id]

        records.sort(key=lambda r: r.started_at, reverse=True)
        return records

    def delete(self, execution_id: str) -> bool:
        """Delete a run record."""
        if execution_id in self._executions:
            del self._executions[execution_id]
            return True
        return False

    def clear(self) -> None:
        """Clear all run records."""
        self._executions.clear()

    def __len__(self) -> int:
        return len(self._executions)

    def _cleanup(self) -> None:
        """Remove old records if over max."""
        if len(self._executions) > self._max_records:
            sorted_records = sorted(
                self._executions.items(),
                key=lambda x: x[1].started_at,
            )
            to_delete = sorted_records[: len(sorted_records) - self._max_records]
            for exec_id, _ in to_delete:
                del self._executions[exec_id]
