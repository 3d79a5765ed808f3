"""
Identities for cached tasks.

A cached entry is keyed either by a ``TemporaryId`` (created locally for a
speculative create, before the server has answered) or by a ``ServerId``
(assigned by the store). The two are distinct types, so reconciliation can
target a provisional entry precisely and never mistakes it for a real task.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union
from uuid import uuid4

from task_tracker.models import Task, TaskStatus


@dataclass(frozen=True)
class TemporaryId:
    """Local placeholder for a task the server has not confirmed yet."""

    token: str

    def __str__(self) -> str:
        return self.token


@dataclass(frozen=True)
class ServerId:
    """ID assigned by the task store."""

    value: str

    def __str__(self) -> str:
        return self.value


TaskKey = Union[TemporaryId, ServerId]


def new_temporary_id() -> TemporaryId:
    # Server ids are plain numeric strings, so the prefix alone rules out a
    # textual clash; uuid4 keeps concurrent creates apart from each other.
    return TemporaryId(f"temp-{uuid4().hex}")


@dataclass(frozen=True)
class CachedTask:
    """A task as the client cache holds it, confirmed or provisional."""

    key: TaskKey
    title: str
    description: str = ""
    status: TaskStatus = TaskStatus.PENDING

    @property
    def is_provisional(self) -> bool:
        return isinstance(self.key, TemporaryId)

    @classmethod
    def from_task(cls, task: Task) -> "CachedTask":
        return cls(
            key=ServerId(task.id),
            title=task.title,
            description=task.description,
            status=task.status,
        )

    def to_task(self) -> Task:
        if self.is_provisional:
            raise ValueError(f"Entry {self.key} has not been confirmed by the server")
        return Task(
            id=self.key.value,
            title=self.title,
            description=self.description,
            status=self.status,
        )
