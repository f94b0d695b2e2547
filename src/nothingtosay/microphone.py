"""Tracks whether the default microphone is recording and whether it is muted."""

from __future__ import annotations

import logging

from nothingtosay.audio.base import MixerControl, SourceStream
from nothingtosay.signals import SignalEmitter

logger = logging.getLogger(__name__)

# Recording clients opened by volume controls to draw their level meters
SELF_MONITORING_IDS = frozenset({"org.gnome.VolumeControl", "org.PulseAudio.pavucontrol"})

ICON_MUTED = "microphone-sensitivity-muted-symbolic"
ICON_UNMUTED = "microphone-sensitivity-high-symbolic"


def get_icon_name(muted: bool) -> str:
    return ICON_MUTED if muted else ICON_UNMUTED


def is_counted_client(application_id: str | None) -> bool:
    """Whether a recording client makes the microphone count as active."""
    if not application_id:
        return False
    return application_id not in SELF_MONITORING_IDS


class Microphone(SignalEmitter):
    """Live view of the default input stream.

    Emits ``notify::active`` when the recording state changes and
    ``notify::muted`` whenever the mute flag may have changed.
    """

    def __init__(self, mixer_control: MixerControl) -> None:
        super().__init__()
        self.active: bool | None = None
        self._stream: SourceStream | None = None
        self._muted_changed_id = 0
        self._mixer_control = mixer_control
        self._mixer_handler_ids: list[int] = []

    def initialize(self) -> None:
        self._mixer_control.open()
        for signal in ("default-source-changed", "stream-added", "stream-removed"):
            self._mixer_handler_ids.append(self._mixer_control.connect(signal, self._on_mixer_changed))
        self.refresh()

    def _on_mixer_changed(self, _mixer_control: MixerControl, *_args: object) -> None:
        self.refresh()

    def refresh(self) -> None:
        if self._stream is not None and self._muted_changed_id:
            self._stream.disconnect(self._muted_changed_id)
            self._muted_changed_id = 0

        was_active = self.active
        self.active = False
        self._stream = self._mixer_control.get_default_source()
        if self._stream is not None:
            self._muted_changed_id = self._stream.connect("notify::is-muted", self._on_stream_muted_changed)
            counted = [
                output.application_id
                for output in self._mixer_control.get_source_outputs()
                if is_counted_client(output.application_id)
            ]
            self.active = bool(counted)
            logger.debug("Recording clients: %s", counted or "none")

        logger.debug("Refreshed: active=%s muted=%s", self.active, self.muted)
        # The stream object may have been replaced even if the flag is the same
        self._notify_muted()
        if self.active != was_active:
            self.emit("notify::active")

    def _on_stream_muted_changed(self, _stream: SourceStream) -> None:
        self._notify_muted()

    def _notify_muted(self) -> None:
        self.emit("notify::muted")

    @property
    def muted(self) -> bool:
        if self._stream is None:
            return True
        return self._stream.is_muted

    @muted.setter
    def muted(self, muted: bool) -> None:
        if self._stream is None:
            return
        self._stream.change_is_muted(muted)

    @property
    def level(self) -> float:
        """Input volume of the default source, 0-100. Boosted volumes read as 100."""
        if self._stream is None:
            return 0
        return min(100, 100 * self._stream.get_volume() / self._mixer_control.get_vol_max_norm())

    def teardown(self) -> None:
        for handler_id in self._mixer_handler_ids:
            self._mixer_control.disconnect(handler_id)
        self._mixer_handler_ids.clear()
        if self._stream is not None and self._muted_changed_id:
            self._stream.disconnect(self._muted_changed_id)
            self._muted_changed_id = 0
        self._stream = None
        self._mixer_control.close()
