"""Minimal notification plumbing: named signals with integer handler ids."""

from __future__ import annotations

import itertools
from collections.abc import Callable

_handler_ids = itertools.count(1)


class SignalEmitter:
    """Connect/disconnect/emit for ``notify::*`` style notifications.

    Handlers are called with the emitter as first argument, followed by
    whatever was passed to :meth:`emit`. Handler ids are unique across all
    emitters, so a stale id never disconnects someone else's handler.
    """

    def __init__(self) -> None:
        self._handlers: dict[int, tuple[str, Callable[..., object]]] = {}

    def connect(self, signal: str, handler: Callable[..., object]) -> int:
        handler_id = next(_handler_ids)
        self._handlers[handler_id] = (signal, handler)
        return handler_id

    def disconnect(self, handler_id: int) -> None:
        self._handlers.pop(handler_id, None)

    def disconnect_all(self) -> None:
        self._handlers.clear()

    def emit(self, signal: str, *args: object) -> None:
        # Snapshot: handlers may disconnect themselves while being called
        for name, handler in list(self._handlers.values()):
            if name == signal:
                handler(self, *args)
