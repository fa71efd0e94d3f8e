"""Session lifecycle: controller, reconnect guard, greeting trigger."""

from __future__ import annotations

from .controller import SessionController
from .greeting import GreetingTrigger
from .guard import ReconnectGuard
from .lifecycle import LiveSession, build_simulated_transport, close_session, start_session
from .models import ConnectionStatus, Decision, ReconnectOutcome

__all__ = [
    "ConnectionStatus",
    "Decision",
    "GreetingTrigger",
    "LiveSession",
    "ReconnectGuard",
    "ReconnectOutcome",
    "SessionController",
    "build_simulated_transport",
    "close_session",
    "start_session",
]
