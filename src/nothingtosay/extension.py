"""Enable/disable lifecycle wiring the microphone, indicator and keybinding together."""

from __future__ import annotations

import logging
from collections.abc import Callable

from nothingtosay.activation import ActivationController, Osd
from nothingtosay.audio.base import MixerControl
from nothingtosay.config import KEYBINDING_KEY_NAME, Config, get_settings
from nothingtosay.mainloop import MainLoop
from nothingtosay.microphone import Microphone

logger = logging.getLogger(__name__)


class Extension:
    """Owns every long-lived object between :meth:`enable` and :meth:`disable`.

    The collaborators are injectable so the wiring can be exercised without
    an audio server, a tray or an X display.
    """

    def __init__(
        self,
        config: Config,
        mainloop: MainLoop,
        mixer_factory: Callable[[], MixerControl] | None = None,
        osd: Osd | None = None,
        keybindings=None,
        indicator_factory: Callable[..., object] | None = None,
    ) -> None:
        self._config = config
        self._settings = get_settings(config)
        self._mainloop = mainloop
        self._mixer_factory = mixer_factory or self._default_mixer
        self._osd = osd
        self._keybindings = keybindings
        self._indicator_factory = indicator_factory or self._default_indicator
        self.microphone: Microphone | None = None
        self.controller: ActivationController | None = None
        self.indicator = None

    def _default_mixer(self) -> MixerControl:
        from nothingtosay.audio.pulse import PulseMixerControl

        return PulseMixerControl(self._mainloop.call_soon, self._config.audio.client_name)

    def _default_indicator(self, microphone: Microphone, on_activate: Callable[..., object]):
        from nothingtosay.indicator import Indicator

        indicator = Indicator(microphone, on_activate, self._mainloop)
        indicator.show()
        return indicator

    def enable(self) -> None:
        if self._osd is None:
            from nothingtosay.osd import NotifySendOsd

            self._osd = NotifySendOsd(enabled=self._config.osd.enabled)
        if self._keybindings is None:
            from nothingtosay.keybinding import KeybindingRegistry

            self._keybindings = KeybindingRegistry(self._mainloop)

        self.microphone = Microphone(self._mixer_factory())
        self.controller = ActivationController(self.microphone, self._osd, self._mainloop)
        self.microphone.connect("notify::active", self.controller.on_active_changed)
        self.microphone.initialize()
        self.indicator = self._indicator_factory(self.microphone, self.controller.on_activate)
        self._keybindings.add_keybinding(KEYBINDING_KEY_NAME, self._settings, self.controller.on_activate)
        logger.info("Enabled (toggle with %s)", self._settings.get(KEYBINDING_KEY_NAME))

    def disable(self) -> None:
        if self._keybindings is not None:
            self._keybindings.remove_keybinding(KEYBINDING_KEY_NAME)
        if self.indicator is not None:
            self.indicator.destroy()
            self.indicator = None
        if self.controller is not None:
            self.controller.destroy()
            self.controller = None
        if self.microphone is not None:
            self.microphone.teardown()
            self.microphone = None
        logger.info("Disabled")


def run_extension(config: Config) -> None:
    """Enable, run the main loop until quit, then disable."""
    mainloop = MainLoop()
    extension = Extension(config, mainloop)
    try:
        extension.enable()
        mainloop.run()
    finally:
        extension.disable()
        mainloop.close()
