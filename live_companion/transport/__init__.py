"""Live streaming transports."""

from __future__ import annotations

from .protocol import LiveTransport
from .simulated import SimulatedTransport, TransportCall

__all__ = ["LiveTransport", "SimulatedTransport", "TransportCall"]
