"""Configuration management with TOML loading and defaults."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

CONFIG_DIR = Path("~/.config/nothingtosay").expanduser()
CONFIG_PATH = CONFIG_DIR / "config.toml"
# System-wide install, used when the user has no config of their own
SYSTEM_CONFIG_PATH = Path("/etc/xdg/nothingtosay/config.toml")

KEYBINDING_KEY_NAME = "toggle-mute"

DEFAULT_CONFIG_TOML = """\
[keybinding]
toggle-mute = "<pause>"   # pynput hotkey, e.g. "<ctrl>+<alt>+m"

[osd]
enabled = true            # show a popup when muting/unmuting and when recording starts/stops

[audio]
client_name = "Nothing to say"  # name shown by the audio server for our connection
"""


class SettingsError(Exception):
    """Settings are missing or unusable. Fatal at startup."""


@dataclass
class KeybindingConfig:
    toggle_mute: str = "<pause>"

    def get(self, name: str) -> str:
        """Look up a keybinding by its key name (``toggle-mute``)."""
        attr = name.replace("-", "_")
        if not hasattr(self, attr):
            raise SettingsError(f"Unknown keybinding {name!r}")
        return getattr(self, attr)


@dataclass
class OsdConfig:
    enabled: bool = True


@dataclass
class AudioConfig:
    client_name: str = "Nothing to say"


@dataclass
class Config:
    keybinding: KeybindingConfig = field(default_factory=KeybindingConfig)
    osd: OsdConfig = field(default_factory=OsdConfig)
    audio: AudioConfig = field(default_factory=AudioConfig)

    @classmethod
    def load(cls) -> Config:
        """Load config from TOML file, falling back to defaults."""
        config = cls()

        path = find_config_file()
        if path is not None:
            try:
                with open(path, "rb") as f:
                    data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise SettingsError(f"Could not parse {path}: {e}") from e
            config = _merge_toml(config, data)

        # Env var overrides
        if keybinding := os.environ.get("NOTHINGTOSAY_KEYBINDING"):
            config.keybinding.toggle_mute = keybinding

        config.validate()
        return config

    def validate(self) -> None:
        hotkey = self.keybinding.toggle_mute
        if not isinstance(hotkey, str) or not hotkey.strip():
            raise SettingsError(f"Keybinding {KEYBINDING_KEY_NAME!r} is not set")


def find_config_file() -> Path | None:
    for path in (CONFIG_PATH, SYSTEM_CONFIG_PATH):
        if path.exists():
            return path
    return None


def get_settings(config: Config) -> KeybindingConfig:
    return config.keybinding


def _merge_toml(config: Config, data: dict) -> Config:
    """Merge TOML data into config dataclass."""
    if "keybinding" in data:
        for k, v in data["keybinding"].items():
            attr = k.replace("-", "_")
            if hasattr(config.keybinding, attr):
                setattr(config.keybinding, attr, v)

    if "osd" in data:
        for k, v in data["osd"].items():
            if hasattr(config.osd, k):
                setattr(config.osd, k, v)

    if "audio" in data:
        for k, v in data["audio"].items():
            if hasattr(config.audio, k):
                setattr(config.audio, k, v)

    return config


def ensure_config_file() -> Path:
    """Create default config file if it doesn't exist. Returns the path."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    if not CONFIG_PATH.exists():
        CONFIG_PATH.write_text(DEFAULT_CONFIG_TOML)
    return CONFIG_PATH
