"""Status and outcome enums for the session lifecycle."""

from __future__ import annotations

from enum import StrEnum


class ConnectionStatus(StrEnum):
    """Connection status as the controller observes it."""

    DISCONNECTED = "disconnected"
    CONNECTED = "connected"

    @classmethod
    def from_flag(cls, connected: bool) -> ConnectionStatus:
        return cls.CONNECTED if connected else cls.DISCONNECTED


class Decision(StrEnum):
    """What one evaluation decided to do."""

    NONE = "none"
    SUPPRESSED = "suppressed"  # modal open, already disconnected
    DISCONNECT = "disconnect"  # modal open while connected
    RECONNECT = "reconnect"


class ReconnectOutcome(StrEnum):
    """How a reconnect attempt ended."""

    SKIPPED = "skipped"  # another reconnect held the guard
    ABORTED = "aborted"  # a modal opened while disconnecting
    CONNECTED = "connected"
    FAILED = "failed"
