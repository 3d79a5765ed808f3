"""In-memory TaskStore implementation."""

from __future__ import annotations

import itertools
import logging
from typing import Dict, Optional, Tuple

from task_tracker.models import (
    MAX_DESCRIPTION_LENGTH,
    MAX_TITLE_LENGTH,
    Task,
    TaskStatus,
)
from task_tracker.services.errors import TaskNotFoundError, TaskValidationError

from .base import TaskStore

logger = logging.getLogger(__name__)


def _coerce_status(status: TaskStatus | str) -> TaskStatus:
    """Accept either the enum or its string value; anything else is invalid."""
    if isinstance(status, TaskStatus):
        return status
    try:
        return TaskStatus(str(status))
    except ValueError as exc:
        allowed = ", ".join(s.value for s in TaskStatus)
        raise TaskValidationError(
            "status", f"Invalid status '{status}'. Expected one of: {allowed}"
        ) from exc


def _clean_text(value, field: str, max_length: int, required: bool) -> str:
    if value is None:
        value = ""
    if not isinstance(value, str):
        raise TaskValidationError(field, "Expected a string")
    value = value.strip()
    if required and not value:
        raise TaskValidationError(field, f"{field.capitalize()} is required")
    if len(value) > max_length:
        raise TaskValidationError(field, f"{field.capitalize()} too long")
    return value


class InMemoryTaskStore(TaskStore):
    """
    Process-local task store.

    - Tasks live in an insertion-ordered dict keyed by ID.
    - IDs come from a monotonically increasing counter ("1", "2", ...) and
      are never reused, even after deletion.
    - No method awaits, so each operation runs to completion on the event
      loop before the next one starts; no locking is needed.
    """

    def __init__(self, start_id: int = 1) -> None:
        self._tasks: Dict[str, Task] = {}
        self._ids = itertools.count(start_id)

    def _next_id(self) -> str:
        return str(next(self._ids))

    async def list_tasks(self) -> Tuple[Task, ...]:
        return tuple(self._tasks.values())

    async def get_task(self, task_id: str) -> Optional[Task]:
        return self._tasks.get(task_id)

    async def create_task(
        self,
        title: str,
        description: str = "",
        status: TaskStatus = TaskStatus.PENDING,
    ) -> Task:
        """Validate, assign an ID and append. Validation happens before the
        counter advances, so a rejected create consumes nothing."""
        title = _clean_text(title, "title", MAX_TITLE_LENGTH, required=True)
        description = _clean_text(
            description, "description", MAX_DESCRIPTION_LENGTH, required=False
        )
        status = _coerce_status(status if status is not None else TaskStatus.PENDING)

        task = Task(
            id=self._next_id(),
            title=title,
            description=description,
            status=status,
        )
        self._tasks[task.id] = task
        logger.debug("Created task id=%s title=%r", task.id, task.title)
        return task

    async def task_exists(self, task_id: str) -> bool:
        return task_id in self._tasks

    async def update_task(self, task_id: str, status: TaskStatus) -> Task:
        status = _coerce_status(status)
        task = self._tasks.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)

        # Reassigning an existing key keeps its position in the dict.
        updated = task.model_copy(update={"status": status})
        self._tasks[task_id] = updated
        logger.debug("Updated task id=%s status=%s", task_id, status.value)
        return updated

    async def delete_task(self, task_id: str) -> bool:
        removed = self._tasks.pop(task_id, None) is not None
        if removed:
            logger.debug("Deleted task id=%s", task_id)
        return removed

    async def count_tasks(self) -> int:
        return len(self._tasks)

    async def close(self) -> None:
        """Nothing to release; the collection lives as long as the process."""
        return None
