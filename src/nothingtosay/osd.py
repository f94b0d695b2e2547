"""On-screen feedback through desktop notifications."""

from __future__ import annotations

import logging
import shutil
import subprocess

logger = logging.getLogger(__name__)

APP_NAME = "Nothing to say"
# Notification servers replace a popup carrying the same tag instead of stacking
_SYNC_TAG = "string:x-canonical-private-synchronous:nothingtosay"
_EXPIRE_MS = 1500


class NotifySendOsd:
    """Shows volume-style popups with ``notify-send``."""

    def __init__(self, enabled: bool = True) -> None:
        self._enabled = enabled
        self._binary = shutil.which("notify-send")

    def build_command(self, icon_name: str, label: str | None, level: float | None) -> list[str]:
        cmd = [
            self._binary or "notify-send",
            f"--app-name={APP_NAME}",
            f"--expire-time={_EXPIRE_MS}",
            "--icon", icon_name,
            "--hint", _SYNC_TAG,
        ]
        if level is not None:
            cmd.extend(["--hint", f"int:value:{max(0, min(100, round(level)))}"])
        cmd.append(label or "Microphone")
        return cmd

    def show(self, monitor: int, icon_name: str, label: str | None = None, level: float | None = None) -> None:
        """Fire-and-forget. ``monitor`` is accepted for parity; popups go to the current one."""
        if not self._enabled:
            return
        if not self._binary:
            logger.info("%s [%s]%s", label or "Microphone", icon_name, "" if level is None else f" {level:.0f}%")
            return
        try:
            subprocess.Popen(
                self.build_command(icon_name, label, level),
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError:
            logger.warning("Could not run notify-send", exc_info=True)
