"""The single event loop every callback runs on."""

from __future__ import annotations

import asyncio
import logging
import signal
from collections.abc import Callable
from typing import Protocol

logger = logging.getLogger(__name__)


class TimeoutHandle(Protocol):
    def cancel(self) -> None: ...


class MainLoop:
    """asyncio-backed host loop.

    Other threads (tray icon, hotkey listener, audio server events) must
    hand their work over with :meth:`call_soon`; everything else runs as
    discrete turns of this loop.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop or asyncio.new_event_loop()

    def timeout_add(self, interval_ms: int, callback: Callable[..., object], *args: object) -> asyncio.TimerHandle:
        """Run ``callback(*args)`` once after ``interval_ms`` milliseconds."""
        return self._loop.call_later(interval_ms / 1000, callback, *args)

    @staticmethod
    def source_remove(handle: TimeoutHandle) -> None:
        handle.cancel()

    def call_soon(self, callback: Callable[..., object], *args: object) -> None:
        """Thread-safe: schedule ``callback(*args)`` on the loop."""
        try:
            self._loop.call_soon_threadsafe(callback, *args)
        except RuntimeError:
            # Late events from other threads during shutdown
            logger.debug("Dropping %r, loop is closed", callback)

    def run(self) -> None:
        """Run until :meth:`quit` or SIGINT/SIGTERM."""
        for sig in (signal.SIGINT, signal.SIGTERM):
            self._loop.add_signal_handler(sig, self._loop.stop)
        try:
            self._loop.run_forever()
        finally:
            for sig in (signal.SIGINT, signal.SIGTERM):
                self._loop.remove_signal_handler(sig)

    def quit(self) -> None:
        self.call_soon(self._loop.stop)

    def close(self) -> None:
        self._loop.close()
