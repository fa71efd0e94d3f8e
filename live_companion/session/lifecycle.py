"""Live session wiring and lifecycle helpers."""

from __future__ import annotations

from dataclasses import dataclass

from ..config.settings import LiveSettings
from ..core.profiles import UserProfile, get_preset
from ..core.state import AppState
from ..transport.protocol import LiveTransport
from ..transport.simulated import SimulatedTransport
from .controller import SessionController
from .greeting import GreetingTrigger


@dataclass
class LiveSession:
    """Stores, transport, controller and greeting trigger for one live session."""

    state: AppState
    transport: LiveTransport
    controller: SessionController
    greeting: GreetingTrigger

    @classmethod
    def create(
        cls,
        state: AppState,
        transport: LiveTransport,
        *,
        settle_delay: float = 0.0,
    ) -> LiveSession:
        return cls(
            state=state,
            transport=transport,
            controller=SessionController(state, transport, settle_delay=settle_delay),
            greeting=GreetingTrigger(transport),
        )

    @classmethod
    def from_settings(
        cls,
        settings: LiveSettings,
        transport: LiveTransport | None = None,
    ) -> LiveSession:
        """Build a session from settings, defaulting to the simulated transport."""
        state = AppState.create(
            agent=get_preset(settings.agent_preset),
            user=UserProfile(name=settings.user_name, info=settings.user_info),
            use_grounding=settings.use_grounding,
        )
        if transport is None:
            transport = build_simulated_transport(settings)
        return cls.create(state, transport, settle_delay=settings.settle_delay)


def build_simulated_transport(settings: LiveSettings) -> SimulatedTransport:
    """Create the in-memory transport described by ``settings.transport``."""
    transport = SimulatedTransport(latency=settings.transport.latency)
    if settings.transport.fail_next_connect:
        transport.fail_next_connect()
    return transport


async def start_session(session: LiveSession) -> None:
    """Start reacting to state changes. Greeting first so it sees the initial status."""
    session.greeting.start()
    session.controller.start()


async def close_session(session: LiveSession) -> None:
    """Close the connection and detach every observer."""
    await session.controller.close()
    session.greeting.stop()
