"""Transport protocol for the live streaming connection."""

from __future__ import annotations

from typing import Any, Protocol

from ..core.config import LiveConnectConfig
from ..core.events import StatusCallback


class LiveTransport(Protocol):
    """Narrow interface the session controller drives.

    Implementations own sockets and audio/text framing. Only the session
    controller may call ``connect`` and ``disconnect`` while it is active.
    """

    @property
    def connected(self) -> bool:
        """Current connection status."""
        ...

    async def connect(self, config: LiveConnectConfig) -> None:
        """Open the connection with ``config``. Raises on failure."""
        ...

    async def disconnect(self) -> None:
        """Close the connection. Raises on failure."""
        ...

    def send(self, message: dict[str, Any], end_of_turn: bool = True) -> None:
        """Send a client message over the open connection."""
        ...

    def emit(self, event_name: str, payload: Any) -> None:
        """Publish an event (e.g. ``"error"``) to transport listeners."""
        ...

    def add_status_observer(self, observer: StatusCallback) -> None:
        """Attach an observer called with the new ``connected`` flag."""
        ...

    def remove_status_observer(self, observer: StatusCallback) -> None:
        """Detach a status observer."""
        ...
