"""PulseAudio (and PipeWire-pulse) mixer service via pulsectl."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

import pulsectl

from nothingtosay.audio.base import MixerControl, MixerError, SourceOutput, SourceStream

logger = logging.getLogger(__name__)

_FACILITIES = pulsectl.PulseEventFacilityEnum
_TYPES = pulsectl.PulseEventTypeEnum


class PulseSourceStream(SourceStream):
    """A PulseAudio source, refreshed from server events by its mixer."""

    def __init__(self, pulse: pulsectl.Pulse, info) -> None:
        super().__init__()
        self._pulse = pulse
        self._info = info
        self.index: int = info.index
        self.name: str = info.name

    @property
    def is_muted(self) -> bool:
        return bool(self._info.mute)

    def change_is_muted(self, muted: bool) -> None:
        try:
            self._pulse.source_mute(self.index, mute=muted)
        except pulsectl.PulseError:
            logger.warning("Could not change mute state of %s", self.name, exc_info=True)

    def get_volume(self) -> float:
        return self._info.volume.value_flat

    def update(self, info) -> None:
        was_muted = self.is_muted
        self._info = info
        if self.is_muted != was_muted:
            self.emit("notify::is-muted")


class PulseMixerControl(MixerControl):
    """Mixer backed by two pulsectl connections.

    One connection serves queries and commands on the loop thread. The
    other blocks in ``event_listen()`` on a daemon thread and only forwards
    raw events to the loop through ``call_soon``.
    """

    def __init__(self, call_soon: Callable[..., None], client_name: str = "Nothing to say") -> None:
        super().__init__()
        self._call_soon = call_soon
        self._client_name = client_name
        self._pulse: pulsectl.Pulse | None = None
        self._events: pulsectl.Pulse | None = None
        self._listener: threading.Thread | None = None
        self._streams: dict[int, PulseSourceStream] = {}
        self._default_source_name = ""
        self._closed = False

    def open(self) -> None:
        try:
            self._pulse = pulsectl.Pulse(self._client_name)
            self._events = pulsectl.Pulse(f"{self._client_name} (events)")
        except pulsectl.PulseError as e:
            self._close_connections()
            raise MixerError(f"Could not connect to the audio server: {e}") from e

        self._default_source_name = self._query_default_source_name()
        self._events.event_mask_set("server", "source", "source_output")
        self._events.event_callback_set(self._on_raw_event)
        self._listener = threading.Thread(target=self._listen, name="pulse-events", daemon=True)
        self._listener.start()

    def _listen(self) -> None:
        try:
            self._events.event_listen()
        except pulsectl.PulseDisconnected:
            logger.warning("Lost connection to the audio server")

    def _on_raw_event(self, event) -> None:
        # Listener thread: no pulse calls allowed here
        self._call_soon(self._dispatch, event.facility, event.t, event.index)

    def _dispatch(self, facility, event_type, index: int) -> None:
        if self._closed:
            return
        if facility == _FACILITIES.server:
            name = self._query_default_source_name()
            if name != self._default_source_name:
                logger.debug("Default source changed: %r -> %r", self._default_source_name, name)
                self._default_source_name = name
                self.emit("default-source-changed", name)
        elif facility == _FACILITIES.source and event_type == _TYPES.change:
            stream = self._streams.get(index)
            if stream is not None:
                try:
                    stream.update(self._pulse.source_info(index))
                except pulsectl.PulseIndexError:
                    logger.debug("Source %d vanished before it could be read", index)
        elif event_type == _TYPES.new:
            self.emit("stream-added", index)
        elif event_type == _TYPES.remove:
            if facility == _FACILITIES.source:
                self._streams.pop(index, None)
            self.emit("stream-removed", index)

    def _query_default_source_name(self) -> str:
        try:
            return self._pulse.server_info().default_source_name or ""
        except pulsectl.PulseOperationFailed:
            logger.debug("Could not read server info", exc_info=True)
            return ""

    def get_default_source(self) -> PulseSourceStream | None:
        if not self._default_source_name:
            return None
        try:
            info = self._pulse.get_source_by_name(self._default_source_name)
        except pulsectl.PulseIndexError:
            return None
        stream = self._streams.get(info.index)
        if stream is None:
            stream = self._streams[info.index] = PulseSourceStream(self._pulse, info)
        else:
            stream.update(info)
        return stream

    def get_source_outputs(self) -> list[SourceOutput]:
        try:
            outputs = self._pulse.source_output_list()
        except pulsectl.PulseOperationFailed:
            logger.debug("Could not list recording clients", exc_info=True)
            return []
        return [
            SourceOutput(index=output.index, application_id=output.proplist.get("application.id", ""))
            for output in outputs
        ]

    def get_vol_max_norm(self) -> float:
        return 1.0

    def close(self) -> None:
        self._closed = True
        self.disconnect_all()
        if self._events is not None:
            self._events.event_listen_stop()
        if self._listener is not None:
            self._listener.join(timeout=5)
            self._listener = None
        self._close_connections()
        self._streams.clear()

    def _close_connections(self) -> None:
        for conn in (self._events, self._pulse):
            if conn is not None:
                conn.close()
        self._events = None
        self._pulse = None
