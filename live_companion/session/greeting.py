"""Greeting trigger: asks the agent to introduce itself on each new connection."""

from __future__ import annotations

import logging

from ..core.events import GREETING_PROMPT
from ..errors import TransportError
from ..transport.protocol import LiveTransport

logger = logging.getLogger(__name__)


class GreetingTrigger:
    """Sends one greeting request per not-connected -> connected transition."""

    def __init__(self, transport: LiveTransport, *, prompt: str = GREETING_PROMPT) -> None:
        self._transport = transport
        self._prompt = prompt
        self._was_connected = False
        self._started = False
        self.greetings_sent = 0

    def start(self) -> None:
        """Subscribe to status changes; greets right away if already connected."""
        if self._started:
            return
        self._transport.add_status_observer(self._on_status_change)
        self._started = True
        self._on_status_change(self._transport.connected)

    def stop(self) -> None:
        if not self._started:
            return
        self._transport.remove_status_observer(self._on_status_change)
        self._started = False
        self._was_connected = False

    def _on_status_change(self, connected: bool) -> None:
        became_connected = connected and not self._was_connected
        self._was_connected = connected
        if not became_connected:
            return
        try:
            self._transport.send({"text": self._prompt}, end_of_turn=True)
        except TransportError as exc:
            logger.warning("Could not send session greeting: %s", exc)
            return
        self.greetings_sent += 1
        logger.debug("Sent session greeting")
