from .base import Entries, TaskMutation
from .create_task import CreateTaskMutation
from .delete_task import DeleteTaskMutation
from .update_status import UpdateStatusMutation

__all__ = [
    "CreateTaskMutation",
    "DeleteTaskMutation",
    "Entries",
    "TaskMutation",
    "UpdateStatusMutation",
]
