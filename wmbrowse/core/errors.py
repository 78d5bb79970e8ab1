"""
Errors — Failure taxonomy for console workflows

Everything a command handler is expected to survive derives from
WorldModelError. The dispatcher reports these as one line and keeps the
session running; any other exception ends the session.
"""

from typing import Optional


class WorldModelError(Exception):
    """Base for failures that abort one command, never the session."""


class UsageError(WorldModelError):
    """Malformed command arguments, detected before any network call."""

    def __init__(self, message: str, usage: Optional[str] = None):
        self.usage = usage
        super().__init__(message)

    def __str__(self) -> str:
        text = super().__str__()
        if self.usage:
            return f"{text}\nUsage: {self.usage}"
        return text


class LinkError(WorldModelError):
    """A world model link refused, timed out, or faulted."""


class NegotiationError(WorldModelError):
    """Attribute type could not be resolved within the allowed attempts."""

    def __init__(self, attribute: str, attempts: int):
        self.attribute = attribute
        self.attempts = attempts
        super().__init__(f"Attribute type for \"{attribute}\" not recognized after {attempts} attempts.")


class ValueEncodingError(WorldModelError):
    """Text could not be converted by the selected value type."""


class StreamError(WorldModelError):
    """A range stream reported an error mid-drain."""

    def __init__(self, cause: Optional[BaseException], delivered: int = 0):
        self.cause = cause
        self.delivered = delivered
        detail = f": {cause}" if cause else ""
        super().__init__(f"Stream failed after {delivered} snapshot(s){detail}")
