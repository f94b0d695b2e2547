"""Mute toggle driven by clicks and the global keybinding."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from nothingtosay.microphone import get_icon_name

if TYPE_CHECKING:
    from nothingtosay.mainloop import TimeoutHandle
    from nothingtosay.microphone import Microphone

logger = logging.getLogger(__name__)

# Delay before muting; a retrigger inside this window keeps the mic open (push-to-talk)
MUTE_DELAY_MS = 100

# Current monitor
OSD_MONITOR = -1


class Osd(Protocol):
    def show(self, monitor: int, icon_name: str, label: str | None, level: float | None) -> None: ...


class Scheduler(Protocol):
    def timeout_add(self, interval_ms: int, callback, *args) -> TimeoutHandle: ...

    def source_remove(self, handle: TimeoutHandle) -> None: ...


class ActivationController:
    """Turns activation triggers into mute changes and on-screen feedback.

    Unmuting is immediate. Muting is delayed by :data:`MUTE_DELAY_MS`, and
    every trigger seen before the delayed mute runs cancels it and arms a
    new one, so holding a push-to-talk key never cuts the audio.
    """

    def __init__(self, microphone: Microphone, osd: Osd, scheduler: Scheduler) -> None:
        self._microphone = microphone
        self._osd = osd
        self._scheduler = scheduler
        self._pending_mute: TimeoutHandle | None = None
        self._initialised = False

    @property
    def mute_pending(self) -> bool:
        return self._pending_mute is not None

    def on_activate(self, *_args: object) -> None:
        microphone = self._microphone
        if microphone.muted:
            self._cancel_pending_mute()
            microphone.muted = False
            self._show_osd(None, False, microphone.level)
            return

        if self._pending_mute is not None:
            self._cancel_pending_mute()
            # keep the popup visible while the key is held
            self._show_osd(None, False, microphone.level)
        self._pending_mute = self._scheduler.timeout_add(MUTE_DELAY_MS, self._on_mute_timeout)
        logger.debug("Mute scheduled in %d ms", MUTE_DELAY_MS)

    def _on_mute_timeout(self) -> None:
        self._pending_mute = None
        self._microphone.muted = True
        self._show_osd(None, True, 0)
        logger.debug("Muted after delay")

    def _cancel_pending_mute(self) -> None:
        if self._pending_mute is not None:
            self._scheduler.source_remove(self._pending_mute)
            self._pending_mute = None
            logger.debug("Pending mute cancelled")

    def on_active_changed(self, microphone: Microphone) -> None:
        """Announce recording start/stop, except for the state found at startup."""
        if self._initialised:
            label = "Microphone activated" if microphone.active else "Microphone deactivated"
            self._show_osd(label, microphone.muted, None)
        self._initialised = True

    def _show_osd(self, label: str | None, muted: bool, level: float | None) -> None:
        self._osd.show(OSD_MONITOR, get_icon_name(muted), label, level)

    def destroy(self) -> None:
        self._cancel_pending_mute()
