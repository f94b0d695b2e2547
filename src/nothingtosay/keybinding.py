"""Global keybindings via pynput."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from nothingtosay.config import SettingsError

if TYPE_CHECKING:
    from nothingtosay.config import KeybindingConfig
    from nothingtosay.mainloop import MainLoop

logger = logging.getLogger(__name__)


class KeybindingRegistry:
    """Named hotkeys, all served by one press/release ``keyboard.Listener``.

    A binding fires on every press event that completes its combination,
    including autorepeat presses while the key is held, so a held toggle
    key keeps re-arming the delayed mute. The listener is rebuilt whenever
    a binding is added or removed. Key events arrive on pynput's thread and
    handlers are handed to the main loop.
    """

    def __init__(self, mainloop: MainLoop) -> None:
        self._mainloop = mainloop
        self._bindings: dict[str, tuple[str, frozenset, Callable[..., object]]] = {}
        self._listener = None
        # Only touched from the listener thread once it runs
        self._pressed: set = set()

    def add_keybinding(self, name: str, settings: KeybindingConfig, handler: Callable[..., object]) -> None:
        from pynput import keyboard

        hotkey = settings.get(name)
        try:
            keys = frozenset(keyboard.HotKey.parse(hotkey))
        except ValueError as e:
            raise SettingsError(f"Invalid keybinding for {name!r}: {hotkey!r} ({e})") from e

        self._bindings[name] = (hotkey, keys, handler)
        logger.debug("Keybinding %s -> %s", name, hotkey)
        self._restart()

    def remove_keybinding(self, name: str) -> None:
        if self._bindings.pop(name, None) is None:
            return
        self._restart()

    @property
    def names(self) -> list[str]:
        return list(self._bindings)

    def _restart(self) -> None:
        from pynput import keyboard

        if self._listener is not None:
            self._listener.stop()
            self._listener = None
        self._pressed = set()
        if not self._bindings:
            return
        self._listener = keyboard.Listener(on_press=self._on_press, on_release=self._on_release)
        self._listener.daemon = True
        self._listener.start()

    def _canonical(self, key):
        listener = self._listener
        if key is None or listener is None:
            return None
        return listener.canonical(key)

    def _on_press(self, key) -> None:
        key = self._canonical(key)
        if key is None:
            return
        self._pressed.add(key)
        for _hotkey, keys, handler in list(self._bindings.values()):
            if key in keys and keys <= self._pressed:
                self._mainloop.call_soon(handler)

    def _on_release(self, key) -> None:
        key = self._canonical(key)
        if key is not None:
            self._pressed.discard(key)
