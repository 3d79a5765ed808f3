"""
Task store package entrypoint.

Provides the factory for selecting the desired backend. The application
factory calls it once at startup and owns the resulting instance for the
lifetime of the process.
"""

from __future__ import annotations

import os

from fastapi import Request

from .base import TaskStore
from .memory_store import InMemoryTaskStore


__all__ = [
    "InMemoryTaskStore",
    "TaskStore",
    "create_task_store",
    "get_task_store",
]


def create_task_store() -> TaskStore:
    """Instantiate the configured task store backend."""

    backend = (os.getenv("TASK_STORE_BACKEND") or "memory").strip().lower()

    if backend == "memory":
        return InMemoryTaskStore()

    raise ValueError(
        f"Unsupported TASK_STORE_BACKEND '{backend}'. "
        "Supported values: memory"
    )


def get_task_store(request: Request) -> TaskStore:
    """
    FastAPI dependency returning the store owned by the running app.

    The application factory attaches exactly one store to ``app.state`` at
    startup; tests can swap it with ``app.dependency_overrides``.
    """

    return request.app.state.task_store
