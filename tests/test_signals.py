"""Tests for signal connect/disconnect/emit."""

from __future__ import annotations

from nothingtosay.signals import SignalEmitter


class TestSignalEmitter:
    def test_handlers_get_emitter_and_args(self):
        emitter = SignalEmitter()
        seen = []
        emitter.connect("stream-added", lambda source, index: seen.append((source, index)))
        emitter.emit("stream-added", 3)
        assert seen == [(emitter, 3)]

    def test_only_matching_signal(self):
        emitter = SignalEmitter()
        seen = []
        emitter.connect("notify::muted", lambda source: seen.append("muted"))
        emitter.emit("notify::active")
        assert seen == []

    def test_disconnect(self):
        emitter = SignalEmitter()
        seen = []
        handler_id = emitter.connect("notify::muted", lambda source: seen.append(1))
        emitter.disconnect(handler_id)
        emitter.emit("notify::muted")
        assert seen == []

    def test_ids_unique_across_emitters(self):
        first, second = SignalEmitter(), SignalEmitter()
        seen = []
        first_id = first.connect("x", lambda source: seen.append("first"))
        second.connect("x", lambda source: seen.append("second"))
        second.disconnect(first_id)
        second.emit("x")
        assert seen == ["second"]

    def test_handler_may_disconnect_itself(self):
        emitter = SignalEmitter()
        seen = []

        def once(source):
            seen.append(1)
            source.disconnect(handler_id)

        handler_id = emitter.connect("x", once)
        emitter.emit("x")
        emitter.emit("x")
        assert seen == [1]
