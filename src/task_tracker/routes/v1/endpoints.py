"""
Task endpoints.

Every response carries the ``success`` envelope. Failures are raised as
``TaskTrackerError`` subclasses and rendered by the handlers registered in
``task_tracker.app``.
"""
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from task_tracker import __version__
from task_tracker.models import CreateTaskInput, UpdateTaskInput
from task_tracker.services.errors import TaskNotFoundError
from task_tracker.services.task_store import TaskStore, get_task_store

router = APIRouter()


@router.get("/")
async def api_info() -> Dict[str, Any]:
    """Describe the API and list its endpoints."""
    return {
        "success": True,
        "message": "Task Management API",
        "version": __version__,
        "endpoints": {
            "GET /tasks": "Get all tasks",
            "POST /tasks": "Create a new task",
            "PATCH /tasks/{id}": "Update task status",
            "DELETE /tasks/{id}": "Delete a task",
            "GET /health": "Health check",
        },
    }


@router.get("/health")
async def health() -> Dict[str, Any]:
    return {
        "success": True,
        "message": "Task Management API is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/tasks")
async def list_tasks(store: TaskStore = Depends(get_task_store)) -> Dict[str, Any]:
    """
    Get every task, in creation order.

    Returns:
        Dict with the tasks under ``data`` and their number under ``count``
    """
    tasks = await store.list_tasks()
    return {
        "success": True,
        "data": [task.model_dump(mode="json") for task in tasks],
        "count": len(tasks),
        "message": f"Retrieved {len(tasks)} tasks",
    }


@router.post("/tasks", status_code=status.HTTP_201_CREATED)
async def create_task(
    payload: CreateTaskInput,
    store: TaskStore = Depends(get_task_store),
) -> Dict[str, Any]:
    """
    Create a task. The store assigns the ID; status defaults to pending.

    Args:
        payload: title (1-100 chars), optional description (up to 500 chars),
            optional status
    """
    task = await store.create_task(
        title=payload.title,
        description=payload.description,
        status=payload.status,
    )
    return {
        "success": True,
        "data": task.model_dump(mode="json"),
        "message": "Task created successfully",
    }


@router.patch("/tasks/{task_id}")
async def update_task_status(
    task_id: str,
    payload: UpdateTaskInput,
    store: TaskStore = Depends(get_task_store),
) -> Dict[str, Any]:
    """Change a task's status. The body is validated before the ID is looked up."""
    task = await store.update_task(task_id, payload.status)
    return {
        "success": True,
        "data": task.model_dump(mode="json"),
        "message": "Task status updated successfully",
    }


@router.delete("/tasks/{task_id}")
async def delete_task(
    task_id: str,
    store: TaskStore = Depends(get_task_store),
) -> Dict[str, Any]:
    if not await store.task_exists(task_id):
        raise TaskNotFoundError(task_id)

    if not await store.delete_task(task_id):
        # The existence check above makes this unreachable in a single process.
        raise RuntimeError(f"Failed to delete task {task_id}")

    return {
        "success": True,
        "message": f"Task with ID {task_id} deleted successfully",
    }
