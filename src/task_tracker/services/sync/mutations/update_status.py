from dataclasses import replace
from typing import Union

from pydantic import ValidationError

from task_tracker.models import Task, TaskStatus, UpdateTaskInput
from task_tracker.services.errors import TaskValidationError
from task_tracker.services.sync.identity import ServerId
from task_tracker.services.sync.mutations.base import Entries, TaskMutation


class UpdateStatusMutation(TaskMutation):
    """Patch the status of one task."""

    refresh_on_success = True

    def __init__(self, task_id: str, status: Union[TaskStatus, str]):
        self.key = ServerId(task_id)
        try:
            self.update = UpdateTaskInput(status=status)
        except ValidationError as exc:
            raise TaskValidationError.from_pydantic(exc) from exc

    def apply(self, entries: Entries) -> Entries:
        return tuple(
            replace(entry, status=self.update.status) if entry.key == self.key else entry
            for entry in entries
        )

    async def send(self, client) -> Task:
        return await client.update_task_status(self.key.value, self.update)

    def describe(self) -> str:
        return f"set {self.key} to {self.update.status.value}"
