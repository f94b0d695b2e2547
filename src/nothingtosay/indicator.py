"""Tray icon showing the microphone mute state."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from PIL import Image, ImageDraw

from nothingtosay.microphone import ICON_MUTED, get_icon_name

if TYPE_CHECKING:
    from nothingtosay.mainloop import MainLoop
    from nothingtosay.microphone import Microphone

INDICATOR_NAME = "Nothing to say Indicator"

_SIZE = 64
_FOREGROUND = (230, 230, 230, 255)
_MUTED_SLASH = (220, 60, 60, 255)


def render_icon(icon_name: str) -> Image.Image:
    """Draw the symbolic microphone for ``icon_name``."""
    img = Image.new("RGBA", (_SIZE, _SIZE), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)

    draw.rounded_rectangle([22, 4, 42, 36], radius=10, fill=_FOREGROUND)
    draw.arc([12, 20, 52, 48], start=0, end=180, fill=_FOREGROUND, width=4)
    draw.line([32, 48, 32, 58], fill=_FOREGROUND, width=4)
    draw.line([20, 58, 44, 58], fill=_FOREGROUND, width=4)

    if icon_name == ICON_MUTED:
        draw.line([48, 4, 16, 56], fill=_MUTED_SLASH, width=6)

    return img


class Indicator:
    """Status icon: click toggles mute, the image follows ``notify::muted``.

    pystray calls menu handlers from its own thread; they are handed to the
    main loop before touching any state.
    """

    def __init__(
        self,
        microphone: Microphone,
        on_activate: Callable[..., object],
        mainloop: MainLoop,
    ) -> None:
        import pystray

        self._microphone = microphone
        self._on_activate = on_activate
        self._mainloop = mainloop
        self.icon_name = get_icon_name(microphone.muted)
        self._icon = pystray.Icon(
            INDICATOR_NAME,
            icon=render_icon(self.icon_name),
            title=INDICATOR_NAME,
            menu=pystray.Menu(
                pystray.MenuItem("Toggle microphone", self._on_click, default=True),
                pystray.MenuItem("Quit", self._on_quit),
            ),
        )
        self._muted_changed_id = microphone.connect("notify::muted", self._on_muted_changed)

    def show(self) -> None:
        self._icon.run_detached()

    def _on_click(self, _icon, _item) -> None:
        self._mainloop.call_soon(self._on_activate)

    def _on_quit(self, _icon, _item) -> None:
        self._mainloop.quit()

    def _on_muted_changed(self, microphone: Microphone) -> None:
        icon_name = get_icon_name(microphone.muted)
        if icon_name != self.icon_name:
            self.icon_name = icon_name
            self._icon.icon = render_icon(icon_name)

    def destroy(self) -> None:
        self._microphone.disconnect(self._muted_changed_id)
        self._icon.stop()
