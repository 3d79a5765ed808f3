"""
Error taxonomy shared by the server and the client.

Each class carries enough to build the API error envelope
(``{"success": false, "error": ..., "message": ...}``) so routes and the
transport client map failures the same way in both directions.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional


class TaskTrackerError(Exception):
    """Base class for every failure the task tracker reports on purpose."""

    category = "Application Error"
    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class TaskValidationError(TaskTrackerError):
    """Input failed the task schema (title/description length, status value)."""

    category = "Validation Error"
    status_code = 400

    def __init__(self, field: Optional[str], detail: str, message: Optional[str] = None):
        self.field = field
        self.detail = detail
        if message is None:
            prefix = f"{field}: " if field else ""
            message = f"Invalid input: {prefix}{detail}"
        super().__init__(message)

    @classmethod
    def from_pydantic(cls, exc) -> "TaskValidationError":
        """Build from a pydantic (or FastAPI request) validation error."""
        return cls.from_message(f"Invalid input: {format_validation_errors(exc.errors())}")

    @classmethod
    def from_message(cls, message: str) -> "TaskValidationError":
        """Rebuild from a server-side message that is already fully formatted."""
        return cls(None, message, message=message)


def format_validation_errors(errors: Iterable[Mapping[str, Any]]) -> str:
    """Render validation errors as "field: message" pairs.

    The request-body prefix FastAPI adds to locations is dropped, so a bad
    title reads "title: ..." whether it came from a route or a model.
    """
    parts = []
    for error in errors:
        loc = [str(p) for p in error.get("loc", ()) if p != "body"]
        field = ".".join(loc) or "body"
        parts.append(f"{field}: {error.get('msg', 'Invalid value')}")
    return ", ".join(parts)


class TaskNotFoundError(TaskTrackerError):
    """The referenced task id does not exist."""

    category = "Not Found"
    status_code = 404

    def __init__(self, task_id: str, message: Optional[str] = None):
        self.task_id = task_id
        super().__init__(message or f"Task with ID {task_id} not found")


class TransportError(TaskTrackerError):
    """The client could not reach the server, or the server failed (5xx)."""

    category = "Transport Error"
    status_code = 503

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code
