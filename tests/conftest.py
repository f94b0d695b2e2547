"""Shared fixtures for nothingtosay tests."""

from __future__ import annotations

import heapq
import itertools

import pytest

from nothingtosay.audio.base import MixerControl, SourceOutput, SourceStream
from nothingtosay.microphone import Microphone


class FakeSourceStream(SourceStream):
    """In-memory source; ``change_is_muted`` applies at once like a fast server."""

    def __init__(self, muted: bool = False, volume: float = 0.5) -> None:
        super().__init__()
        self._muted = muted
        self.volume = volume
        self.mute_requests: list[bool] = []

    @property
    def is_muted(self) -> bool:
        return self._muted

    def change_is_muted(self, muted: bool) -> None:
        self.mute_requests.append(muted)
        self.set_server_muted(muted)

    def set_server_muted(self, muted: bool) -> None:
        if muted != self._muted:
            self._muted = muted
            self.emit("notify::is-muted")

    def get_volume(self) -> float:
        return self.volume


class FakeMixerControl(MixerControl):
    def __init__(self, default_source: FakeSourceStream | None = None) -> None:
        super().__init__()
        self.default_source = default_source
        self.outputs: list[SourceOutput] = []
        self.opened = False
        self.closed = False
        self._indexes = itertools.count()

    def open(self) -> None:
        self.opened = True

    def close(self) -> None:
        self.closed = True
        self.disconnect_all()

    def get_default_source(self) -> FakeSourceStream | None:
        return self.default_source

    def get_source_outputs(self) -> list[SourceOutput]:
        return list(self.outputs)

    def get_vol_max_norm(self) -> float:
        return 1.0

    # Helpers that mimic server events

    def add_client(self, application_id: str = "") -> SourceOutput:
        output = SourceOutput(index=next(self._indexes), application_id=application_id)
        self.outputs.append(output)
        self.emit("stream-added", output.index)
        return output

    def remove_client(self, output: SourceOutput) -> None:
        self.outputs.remove(output)
        self.emit("stream-removed", output.index)

    def set_default_source(self, stream: FakeSourceStream | None) -> None:
        self.default_source = stream
        self.emit("default-source-changed", None)


class FakeTimer:
    def __init__(self, loop: FakeMainLoop, when: int, callback, args) -> None:
        self._loop = loop
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeMainLoop:
    """Manual clock in milliseconds. Timers fire only from :meth:`advance`."""

    def __init__(self) -> None:
        self.now = 0
        self._timers: list[tuple[int, int, FakeTimer]] = []
        self._seq = itertools.count()
        self.soon: list[tuple] = []
        self.removed: list[FakeTimer] = []
        self.quit_called = False

    def timeout_add(self, interval_ms: int, callback, *args) -> FakeTimer:
        timer = FakeTimer(self, self.now + interval_ms, callback, args)
        heapq.heappush(self._timers, (timer.when, next(self._seq), timer))
        return timer

    def source_remove(self, timer: FakeTimer) -> None:
        self.removed.append(timer)
        timer.cancel()

    def call_soon(self, callback, *args) -> None:
        self.soon.append((callback, args))

    def run_pending(self) -> None:
        pending, self.soon = self.soon, []
        for callback, args in pending:
            callback(*args)

    def quit(self) -> None:
        self.quit_called = True

    @property
    def active_timers(self) -> list[FakeTimer]:
        return [t for _, _, t in self._timers if not t.cancelled]

    def advance(self, ms: int) -> None:
        target = self.now + ms
        while self._timers and self._timers[0][0] <= target:
            when, _, timer = heapq.heappop(self._timers)
            self.now = when
            if not timer.cancelled:
                timer.callback(*timer.args)
        self.now = target


class RecordingOsd:
    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def show(self, monitor, icon_name, label=None, level=None) -> None:
        self.calls.append((monitor, icon_name, label, level))


@pytest.fixture
def stream() -> FakeSourceStream:
    return FakeSourceStream(muted=False, volume=0.5)


@pytest.fixture
def mixer(stream) -> FakeMixerControl:
    return FakeMixerControl(default_source=stream)


@pytest.fixture
def microphone(mixer) -> Microphone:
    mic = Microphone(mixer)
    mic.initialize()
    return mic


@pytest.fixture
def mainloop() -> FakeMainLoop:
    return FakeMainLoop()


@pytest.fixture
def osd() -> RecordingOsd:
    return RecordingOsd()


@pytest.fixture
def make_stream():
    """Factory for extra sources, e.g. to swap the default source."""
    return FakeSourceStream
