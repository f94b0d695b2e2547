"""Abstract audio mixer service consumed by the microphone observer."""

from __future__ import annotations

import abc
from dataclasses import dataclass

from nothingtosay.signals import SignalEmitter


class MixerError(RuntimeError):
    """The audio server could not be reached."""


@dataclass(frozen=True)
class SourceOutput:
    """A recording client: a process pulling samples from a source."""

    index: int
    application_id: str = ""


class SourceStream(SignalEmitter, abc.ABC):
    """An input stream (source) on the audio server.

    Emits ``notify::is-muted`` whenever its mute flag changes.
    """

    @property
    @abc.abstractmethod
    def is_muted(self) -> bool:
        """Current mute flag as last reported by the server."""

    @abc.abstractmethod
    def change_is_muted(self, muted: bool) -> None:
        """Ask the server to change the mute flag. Fire-and-forget."""

    @abc.abstractmethod
    def get_volume(self) -> float:
        """Current volume in the units of :meth:`MixerControl.get_vol_max_norm`."""


class MixerControl(SignalEmitter, abc.ABC):
    """Connection to the audio server's mixer.

    Emits ``default-source-changed``, ``stream-added`` and ``stream-removed``.
    """

    @abc.abstractmethod
    def open(self) -> None:
        """Connect to the server and start delivering events."""

    @abc.abstractmethod
    def close(self) -> None:
        """Disconnect. No events are emitted afterwards."""

    @abc.abstractmethod
    def get_default_source(self) -> SourceStream | None:
        """The currently selected input stream, if any."""

    @abc.abstractmethod
    def get_source_outputs(self) -> list[SourceOutput]:
        """All clients currently recording."""

    @abc.abstractmethod
    def get_vol_max_norm(self) -> float:
        """Volume value that corresponds to 100%."""
