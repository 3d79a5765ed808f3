from task_tracker.services.sync.identity import ServerId
from task_tracker.services.sync.mutations.base import Entries, TaskMutation


class DeleteTaskMutation(TaskMutation):
    """Remove one task."""

    refresh_on_success = True

    def __init__(self, task_id: str):
        self.key = ServerId(task_id)

    def apply(self, entries: Entries) -> Entries:
        return tuple(entry for entry in entries if entry.key != self.key)

    async def send(self, client) -> None:
        await client.delete_task(self.key.value)

    def describe(self) -> str:
        return f"delete {self.key}"
