"""Exceptions raised by hourglass."""

from __future__ import annotations


class HourglassError(Exception):
    """Base class for every error hourglass reports to the user."""


class InvalidDuration(HourglassError, ValueError):
    """The duration argument could not be parsed."""

    def __init__(self, token: str, reason: str) -> None:
        super().__init__(reason)
        self.token = token
        self.reason = reason


class TerminalError(HourglassError):
    """The terminal could not be set up, used, or restored."""


class InputError(TerminalError):
    """Polling or reading keyboard input failed."""


class RenderError(TerminalError):
    """Drawing a frame failed."""
