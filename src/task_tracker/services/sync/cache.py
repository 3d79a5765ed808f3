"""
Client-side task cache with optimistic updates.

Every mutation moves through Idle -> Speculating -> Confirmed | RolledBack:

1. Speculating: in-flight refreshes are cancelled, the current entries are
   snapshotted, and the mutation's speculative transformation is applied.
2. Confirmed: the request succeeded; the mutation reconciles the server's
   answer into the list (and may ask for a full refresh).
3. RolledBack: the request failed; the snapshot is restored as-is and the
   error message is published to the shared ``UIState``.
   If other mutations overlapped it, a refresh follows once all settle.

Entries are an immutable tuple of frozen ``CachedTask`` values, so a
snapshot is just a reference and rollback is always exact.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Callable, Dict, List, Optional, Union

from task_tracker.models import CreateTaskInput, Task, TaskStatus
from task_tracker.services.errors import TaskTrackerError, TaskValidationError
from task_tracker.services.sync.identity import CachedTask, ServerId, TaskKey
from task_tracker.services.sync.mutations import (
    CreateTaskMutation,
    DeleteTaskMutation,
    Entries,
    TaskMutation,
    UpdateStatusMutation,
)
from task_tracker.services.sync.ui_state import UIState
from task_tracker.utils import env_float

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR_MESSAGE = "Something went wrong. Please try again."


class TaskCache:
    """Locally coherent view of the server's task list."""

    def __init__(
        self,
        client,
        ui_state: Optional[UIState] = None,
        refresh_interval: Optional[float] = None,
        stale_after: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.client = client
        self.ui_state = ui_state or UIState()
        self.refresh_interval = (
            refresh_interval
            if refresh_interval is not None
            else env_float("TASK_REFRESH_INTERVAL", 30.0)
        )
        self.stale_after = (
            stale_after if stale_after is not None else env_float("TASK_STALE_AFTER", 300.0)
        )
        self._clock = clock
        self._entries: Entries = ()
        self._updated_at: Optional[float] = None
        self._in_flight = 0
        # Bumped whenever a mutation starts or settles
        self._generation = 0
        self._resync_when_idle = False
        self._refresh_task: Optional[asyncio.Task] = None
        self._refresh_generation = 0
        self._poll_task: Optional[asyncio.Task] = None

    # ---- selectors ----

    @property
    def entries(self) -> Entries:
        """Everything the user should see, provisional entries included."""
        return self._entries

    @property
    def tasks(self) -> List[Task]:
        """Confirmed entries only."""
        return [entry.to_task() for entry in self._entries if not entry.is_provisional]

    @property
    def pending_mutations(self) -> int:
        return self._in_flight

    @property
    def is_stale(self) -> bool:
        if self._updated_at is None:
            return True
        return self._clock() - self._updated_at >= self.stale_after

    def get(self, key: Union[TaskKey, str]) -> Optional[CachedTask]:
        if isinstance(key, str):
            key = ServerId(key)
        for entry in self._entries:
            if entry.key == key:
                return entry
        return None

    def stats(self) -> Dict[str, Any]:
        total = len(self._entries)
        done = sum(1 for entry in self._entries if entry.status is TaskStatus.DONE)
        return {
            "total": total,
            "pending": total - done,
            "done": done,
            "all_done": total > 0 and done == total,
        }

    # ---- reads ----

    def _start_refresh(self) -> asyncio.Task:
        task = self._refresh_task
        if task is not None and not task.done():
            if self._refresh_generation == self._generation:
                return task
            # Its answer would be discarded; start over from current state
            task.cancel()
        self._refresh_generation = self._generation
        self._refresh_task = asyncio.create_task(self._fetch(self._generation))
        return self._refresh_task

    async def _fetch(self, generation: int) -> None:
        self.ui_state.set_loading(True)
        try:
            tasks = await self.client.list_tasks()
        finally:
            self.ui_state.set_loading(False)

        if self._in_flight or self._generation != generation:
            logger.debug(
                "Discarding refresh, mutations changed the list while it was in flight"
            )
            return
        self._entries = tuple(CachedTask.from_task(task) for task in tasks)
        self._updated_at = self._clock()

    async def refresh(self) -> Entries:
        """
        Replace the entries with the server's list.

        Concurrent callers share one fetch. A fetch cancelled by a starting
        mutation is not an error: the current entries are returned. A fetch
        replaced by a newer one is followed to the replacement.

        Raises:
            TaskTrackerError: the fetch itself failed
        """
        task = self._start_refresh()
        await asyncio.wait({task})
        while task.cancelled() and self._refresh_task not in (None, task):
            task = self._refresh_task
            await asyncio.wait({task})
        if not task.cancelled():
            task.result()
        return self._entries

    async def ensure_fresh(self) -> Entries:
        """Refresh only if never loaded or older than ``stale_after``."""
        if self.is_stale:
            return await self.refresh()
        return self._entries

    def _schedule_refresh(self) -> None:
        task = self._start_refresh()
        task.add_done_callback(self._log_refresh_failure)

    @staticmethod
    def _log_refresh_failure(task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.warning("Background refresh failed: %s", exc)

    async def cancel_refresh(self) -> None:
        """Cancel an in-flight refresh and wait until it has stopped."""
        task = self._refresh_task
        if task is not None and not task.done():
            task.cancel()
            await asyncio.wait({task})

    async def wait_for_refresh(self) -> None:
        """Wait for the current refresh, if any, to settle."""
        task = self._refresh_task
        if task is not None:
            await asyncio.wait({task})

    # ---- periodic refresh ----

    def start(self) -> asyncio.Task:
        """Start refreshing every ``refresh_interval`` seconds in the background."""
        if self._poll_task is None or self._poll_task.done():
            self._poll_task = asyncio.create_task(self._poll())
        return self._poll_task

    async def _poll(self) -> None:
        while True:
            await asyncio.sleep(self.refresh_interval)
            if self._in_flight:
                logger.debug("Skipping scheduled refresh, mutation in flight")
                continue
            try:
                await self.refresh()
            except TaskTrackerError as exc:
                logger.warning("Scheduled refresh failed: %s", exc)

    async def close(self) -> None:
        """Stop the periodic refresh and cancel any in-flight fetch."""
        tasks = [t for t in (self._poll_task, self._refresh_task) if t is not None]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.wait(tasks)
        self._poll_task = None
        self._refresh_task = None

    # ---- writes ----

    async def mutate(self, mutation: TaskMutation) -> Any:
        """
        Run one optimistic mutation to completion.

        Returns:
            Whatever the mutation's request returned (the stored task for
            creates and updates)

        Raises:
            Whatever the request raised, after the entries have been restored
            to the snapshot and the message published to ``ui_state``
        """
        self.ui_state.clear_error()
        self._in_flight += 1
        self._generation += 1
        try:
            await self.cancel_refresh()

            snapshot = self._entries
            snapshot_generation = self._generation
            self._entries = mutation.apply(snapshot)
            logger.debug("Speculating: %s", mutation.describe())

            try:
                result = await mutation.send(self.client)
            except asyncio.CancelledError:
                self._entries = snapshot
                raise
            except TaskTrackerError as exc:
                self._roll_back(mutation, snapshot, snapshot_generation, exc.message)
                raise
            except Exception:
                logger.exception("Unexpected failure during %s", mutation.describe())
                self._roll_back(
                    mutation, snapshot, snapshot_generation, UNEXPECTED_ERROR_MESSAGE
                )
                raise

            self._entries = mutation.reconcile(self._entries, result)
            logger.debug("Confirmed: %s", mutation.describe())
        finally:
            self._in_flight -= 1
            self._generation += 1
            if self._resync_when_idle and not self._in_flight:
                self._resync_when_idle = False
                self._schedule_refresh()

        if mutation.refresh_on_success:
            self._schedule_refresh()
        return result

    def _roll_back(
        self, mutation: TaskMutation, snapshot: Entries, generation: int, message: str
    ) -> None:
        logger.warning("Rolling back %s: %s", mutation.describe(), message)
        self._entries = snapshot
        if self._in_flight > 1 or self._generation != generation:
            # Other mutations overlapped this one, so the snapshot may hold
            # their provisional entries or miss their confirmed ones
            self._resync_when_idle = True
        self.ui_state.set_error(message)

    def _build(self, factory, *args) -> TaskMutation:
        try:
            return factory(*args)
        except TaskValidationError as exc:
            self.ui_state.clear_error()
            self.ui_state.set_error(exc.message)
            raise

    async def create_task(self, task: Union[CreateTaskInput, Dict[str, Any]]) -> Task:
        return await self.mutate(self._build(CreateTaskMutation, task))

    async def update_task_status(self, task_id: str, status: Union[TaskStatus, str]) -> Task:
        return await self.mutate(self._build(UpdateStatusMutation, task_id, status))

    async def delete_task(self, task_id: str) -> None:
        await self.mutate(self._build(DeleteTaskMutation, task_id))
