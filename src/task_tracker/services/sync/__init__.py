from .cache import TaskCache
from .identity import CachedTask, ServerId, TaskKey, TemporaryId, new_temporary_id
from .mutations import (
    CreateTaskMutation,
    DeleteTaskMutation,
    TaskMutation,
    UpdateStatusMutation,
)
from .ui_state import UIState

__all__ = [
    "CachedTask",
    "CreateTaskMutation",
    "DeleteTaskMutation",
    "ServerId",
    "TaskCache",
    "TaskKey",
    "TaskMutation",
    "TemporaryId",
    "UIState",
    "UpdateStatusMutation",
    "new_temporary_id",
]
