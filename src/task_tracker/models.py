"""
Task data model shared by the API, the store and the client cache.

Tasks are frozen pydantic models, so anything handed out by the store or the
cache is a value: callers cannot reach back into the owner's collection.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, StringConstraints, field_validator


MAX_TITLE_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 500


class TaskStatus(str, Enum):
    """Enumeration of task states."""

    PENDING = "pending"
    DONE = "done"


class Task(BaseModel):
    """A stored task, as the server owns it."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str = ""
    status: TaskStatus = TaskStatus.PENDING

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value):
        # Some servers hand out numeric ids; the cache only deals in strings.
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


Title = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=MAX_TITLE_LENGTH),
]
Description = Annotated[
    str,
    StringConstraints(strip_whitespace=True, max_length=MAX_DESCRIPTION_LENGTH),
]


class CreateTaskInput(BaseModel):
    """Request body for POST /tasks."""

    title: Title
    description: Description = ""
    status: TaskStatus = TaskStatus.PENDING


class UpdateTaskInput(BaseModel):
    """Request body for PATCH /tasks/{id}. Only the status can change."""

    status: TaskStatus
