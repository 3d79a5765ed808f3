import asyncio
from collections import defaultdict, deque
from typing import Deque, Dict, List, Optional

from task_tracker.models import CreateTaskInput, Task, UpdateTaskInput
from task_tracker.services.errors import TaskNotFoundError


class FakeTaskClient:
    """
    Deterministic stand-in for TaskApiClient backed by a plain list.

    Calls can be held open with ``hold(method)``: the next call to that method
    blocks until the returned event is set, which lets tests look at the cache
    while a request is in flight. Reads see the list as it was when the call
    was made. Writes (id assignment, removal) take effect after the gate
    opens.
    """

    def __init__(self, tasks: Optional[List[Task]] = None):
        self.tasks: List[Task] = list(tasks or [])
        self.next_id = len(self.tasks) + 1
        self.calls: List[str] = []
        self.failures: Dict[str, Exception] = {}
        self._gates: Dict[str, Deque[asyncio.Event]] = defaultdict(deque)

    def hold(self, method: str) -> asyncio.Event:
        gate = asyncio.Event()
        self._gates[method].append(gate)
        return gate

    def fail_next(self, method: str, error: Exception) -> None:
        self.failures[method] = error

    def count(self, method: str) -> int:
        return self.calls.count(method)

    async def _enter(self, method: str) -> None:
        self.calls.append(method)
        if self._gates[method]:
            await self._gates[method].popleft().wait()
        if method in self.failures:
            raise self.failures.pop(method)

    async def list_tasks(self) -> List[Task]:
        listed = list(self.tasks)
        await self._enter("list_tasks")
        return listed

    async def create_task(self, task: CreateTaskInput) -> Task:
        await self._enter("create_task")
        created = Task(
            id=str(self.next_id),
            title=task.title,
            description=task.description,
            status=task.status,
        )
        self.next_id += 1
        self.tasks.append(created)
        return created

    async def update_task_status(self, task_id: str, update: UpdateTaskInput) -> Task:
        await self._enter("update_task_status")
        for i, task in enumerate(self.tasks):
            if task.id == task_id:
                self.tasks[i] = task.model_copy(update={"status": update.status})
                return self.tasks[i]
        raise TaskNotFoundError(task_id, message="Task not found")

    async def delete_task(self, task_id: str) -> None:
        await self._enter("delete_task")
        remaining = [task for task in self.tasks if task.id != task_id]
        if len(remaining) == len(self.tasks):
            raise TaskNotFoundError(task_id, message="Task not found")
        self.tasks = remaining


async def wait_until(predicate, attempts: int = 200) -> None:
    """Yield to the event loop until ``predicate()`` holds."""
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition not reached")
