from typing import Any, Dict, Union

from pydantic import ValidationError

from task_tracker.models import CreateTaskInput, Task
from task_tracker.services.errors import TaskValidationError
from task_tracker.services.sync.identity import CachedTask, ServerId, new_temporary_id
from task_tracker.services.sync.mutations.base import Entries, TaskMutation


class CreateTaskMutation(TaskMutation):
    """Append a provisional task, then swap it for the stored one."""

    def __init__(self, task: Union[CreateTaskInput, Dict[str, Any]]):
        if not isinstance(task, CreateTaskInput):
            try:
                task = CreateTaskInput.model_validate(task)
            except ValidationError as exc:
                raise TaskValidationError.from_pydantic(exc) from exc
        self.task = task
        self.temporary_id = new_temporary_id()

    def apply(self, entries: Entries) -> Entries:
        provisional = CachedTask(
            key=self.temporary_id,
            title=self.task.title,
            description=self.task.description,
            status=self.task.status,
        )
        return entries + (provisional,)

    async def send(self, client) -> Task:
        return await client.create_task(self.task)

    def reconcile(self, entries: Entries, result: Task) -> Entries:
        confirmed = CachedTask.from_task(result)
        server_id = ServerId(result.id)

        # A refresh may already have delivered the stored task; drop any
        # duplicate so exactly one entry carries the server id.
        reconciled = []
        replaced = False
        for entry in entries:
            if entry.key == self.temporary_id:
                reconciled.append(confirmed)
                replaced = True
            elif entry.key != server_id:
                reconciled.append(entry)

        if not replaced:
            reconciled.append(confirmed)
        return tuple(reconciled)

    def describe(self) -> str:
        return f"create {self.task.title!r} as {self.temporary_id}"
