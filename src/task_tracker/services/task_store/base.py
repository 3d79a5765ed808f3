"""
Task store abstractions.

This module defines the contract that any task store backend must satisfy so
that the routes stay agnostic of where tasks live. The store owns the
authoritative task collection; every other copy (such as the client cache) is
derived from it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Tuple

from task_tracker.models import Task, TaskStatus


class TaskStore(ABC):
    """Abstract interface for task persistence backends."""

    @abstractmethod
    async def list_tasks(self) -> Tuple[Task, ...]:
        """Return every task in insertion order as an immutable snapshot."""

    @abstractmethod
    async def get_task(self, task_id: str) -> Optional[Task]:
        """Fetch a task by ID, or None."""

    @abstractmethod
    async def create_task(
        self,
        title: str,
        description: str = "",
        status: TaskStatus = TaskStatus.PENDING,
    ) -> Task:
        """Validate and store a new task, assigning its ID.

        Raises:
            TaskValidationError: title missing/empty/too long, description too
                long, or an unknown status. Nothing is stored.
        """

    @abstractmethod
    async def task_exists(self, task_id: str) -> bool:
        """Check whether a task with this ID is stored."""

    @abstractmethod
    async def update_task(self, task_id: str, status: TaskStatus) -> Task:
        """Replace the status of a task, leaving every other field untouched.

        Raises:
            TaskNotFoundError: no task with this ID.
            TaskValidationError: unknown status.
        """

    @abstractmethod
    async def delete_task(self, task_id: str) -> bool:
        """Remove a task. Returns False when nothing was removed."""

    @abstractmethod
    async def count_tasks(self) -> int:
        """Number of stored tasks."""

    @abstractmethod
    async def close(self) -> None:
        """Release any underlying resources."""
