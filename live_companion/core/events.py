"""Shared event types, constants, and callbacks for live sessions."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

# Event name used by transports to surface failures to the UI.
ERROR_EVENT = "error"

RECONNECT_ERROR_MESSAGE = "Failed to apply new settings. Please try again."

GREETING_PROMPT = "Greet the user and introduce yourself and your role."

# Type for store observers: called with the name of the field that changed
ChangeCallback = Callable[[str], None]

# Type for transport status observers: called with the new connected flag
StatusCallback = Callable[[bool], None]

# Type for transport event listeners
EventListener = Callable[[Any], None]


@dataclass
class ErrorEvent:
    """Payload emitted with ``ERROR_EVENT`` when a session operation fails.

    ``message`` is the user-facing advisory text; ``error`` keeps the
    underlying exception for logs and diagnostics.
    """

    message: str
    error: BaseException | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "error": repr(self.error) if self.error is not None else None,
        }
