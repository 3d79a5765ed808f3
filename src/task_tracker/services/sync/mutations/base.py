from abc import ABC, abstractmethod
from typing import Any, Tuple

from task_tracker.services.sync.identity import CachedTask

Entries = Tuple[CachedTask, ...]


class TaskMutation(ABC):
    """Base class for optimistic mutations.

    A mutation is three steps the cache runs in order: ``apply`` builds the
    speculative list, ``send`` issues the request, ``reconcile`` folds the
    server's answer back in. ``apply`` and ``reconcile`` must be pure: they
    take a tuple and return a new one, leaving the input untouched.
    """

    # Ask the cache for a full refresh once the server has confirmed.
    refresh_on_success: bool = False

    @abstractmethod
    def apply(self, entries: Entries) -> Entries:
        """Return the list as it should look while the request is in flight."""

    @abstractmethod
    async def send(self, client) -> Any:
        """Issue the request through the transport client."""

    def reconcile(self, entries: Entries, result: Any) -> Entries:
        """Return the list once the server has confirmed. By default the
        speculative list already matches."""
        return entries

    def describe(self) -> str:
        return type(self).__name__
