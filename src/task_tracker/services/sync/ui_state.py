"""
UI-scoped state container.

One ``UIState`` is created per client session and handed to every consumer
that needs it (the sync cache publishes failures here, a UI subscribes to
render them). It holds a single error at a time: a newer error replaces the
older one.
"""

from __future__ import annotations

from typing import Callable, List, Optional

Listener = Callable[["UIState"], None]


class UIState:
    def __init__(self) -> None:
        self.error: Optional[str] = None
        self.is_loading: bool = False
        self.selected_task_id: Optional[str] = None
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener. Returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def set_error(self, error: Optional[str]) -> None:
        self.error = error
        self._notify()

    def clear_error(self) -> None:
        if self.error is None:
            return
        self.error = None
        self._notify()

    def set_loading(self, loading: bool) -> None:
        if self.is_loading == loading:
            return
        self.is_loading = loading
        self._notify()

    def set_selected_task(self, task_id: Optional[str]) -> None:
        self.selected_task_id = task_id
        self._notify()
