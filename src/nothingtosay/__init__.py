"""Microphone activity indicator with a push-to-talk friendly mute toggle."""

__version__ = "0.3.0"
