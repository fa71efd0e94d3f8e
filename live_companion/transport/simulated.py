"""In-memory transport that simulates a live streaming connection.

Used by the CLI demo and by tests. It records every connect/disconnect call
and every sent message, can inject one-shot failures, and can hold
operations mid-flight so callers can interleave state changes with an
in-flight connect or disconnect.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any

from ..core.config import LiveConnectConfig
from ..core.events import EventListener, StatusCallback
from ..errors import ConnectError, DisconnectError, TransportError

logger = logging.getLogger(__name__)

_OPS = ("connect", "disconnect")


@dataclass
class TransportCall:
    """One recorded connect or disconnect call."""

    op: str  # "connect" or "disconnect"
    config: LiveConnectConfig | None = None


class SimulatedTransport:
    """Live transport adapter backed by in-process state only."""

    def __init__(self, *, latency: float = 0.0) -> None:
        self.latency = latency
        self.config: LiveConnectConfig | None = None
        self.calls: list[TransportCall] = []
        self.sent: list[tuple[dict[str, Any], bool]] = []
        self.emitted: list[tuple[str, Any]] = []
        self._connected = False
        self._status_observers: list[StatusCallback] = []
        self._listeners: dict[str, list[EventListener]] = defaultdict(list)
        self._fail_connect: BaseException | None = None
        self._fail_disconnect: BaseException | None = None
        self._fail_send: BaseException | None = None
        self._gates = {op: asyncio.Event() for op in _OPS}
        for gate in self._gates.values():
            gate.set()

    # --- Status ---

    @property
    def connected(self) -> bool:
        return self._connected

    def add_status_observer(self, observer: StatusCallback) -> None:
        self._status_observers.append(observer)

    def remove_status_observer(self, observer: StatusCallback) -> None:
        self._status_observers.remove(observer)

    def _set_connected(self, value: bool) -> None:
        if value == self._connected:
            return
        self._connected = value
        logger.info("Simulated transport %s", "connected" if value else "disconnected")
        for obs in list(self._status_observers):
            try:
                obs(value)
            except Exception:
                logger.exception("Transport status observer failed")

    # --- Failure injection and flow control ---

    def fail_next_connect(self, error: BaseException | None = None) -> None:
        """Make the next ``connect`` raise ``error`` (ConnectError by default)."""
        self._fail_connect = error or ConnectError("simulated connect failure")

    def fail_next_disconnect(self, error: BaseException | None = None) -> None:
        """Make the next ``disconnect`` raise ``error`` (DisconnectError by default)."""
        self._fail_disconnect = error or DisconnectError("simulated disconnect failure")

    def fail_next_send(self, error: BaseException | None = None) -> None:
        """Make the next ``send`` raise ``error`` (TransportError by default)."""
        self._fail_send = error or TransportError("simulated send failure")

    def hold(self, *ops: str) -> None:
        """Suspend the named operations (all by default) until ``release``."""
        for op in ops or _OPS:
            self._gates[op].clear()

    def release(self) -> None:
        for gate in self._gates.values():
            gate.set()

    async def _wait(self, op: str) -> None:
        if self.latency > 0:
            await asyncio.sleep(self.latency)
        await self._gates[op].wait()

    # --- Connection lifecycle ---

    async def connect(self, config: LiveConnectConfig) -> None:
        self.calls.append(TransportCall("connect", config))
        if self._connected:
            # Opening a new session replaces the current one.
            self._set_connected(False)
        await self._wait("connect")
        if self._fail_connect is not None:
            error, self._fail_connect = self._fail_connect, None
            raise error
        self.config = config
        self._set_connected(True)

    async def disconnect(self) -> None:
        self.calls.append(TransportCall("disconnect"))
        await self._wait("disconnect")
        if self._fail_disconnect is not None:
            error, self._fail_disconnect = self._fail_disconnect, None
            raise error
        self._set_connected(False)

    # --- Messaging and events ---

    def send(self, message: dict[str, Any], end_of_turn: bool = True) -> None:
        if not self._connected:
            raise TransportError("Cannot send on a closed live connection")
        if self._fail_send is not None:
            error, self._fail_send = self._fail_send, None
            raise error
        self.sent.append((dict(message), end_of_turn))

    def on(self, event_name: str, listener: EventListener) -> None:
        self._listeners[event_name].append(listener)

    def off(self, event_name: str, listener: EventListener) -> None:
        self._listeners[event_name].remove(listener)

    def emit(self, event_name: str, payload: Any) -> None:
        self.emitted.append((event_name, payload))
        for listener in list(self._listeners[event_name]):
            try:
                listener(payload)
            except Exception:
                logger.exception("Listener for %s event failed", event_name)

    # --- Inspection helpers ---

    def ops(self) -> list[str]:
        """Return the recorded operation names in call order."""
        return [call.op for call in self.calls]

    def count(self, op: str) -> int:
        return sum(1 for call in self.calls if call.op == op)
