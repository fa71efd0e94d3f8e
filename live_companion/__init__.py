"""live-companion: keeps a live agent session in sync with application state."""

__version__ = "0.1.0"

from .core import (
    AgentProfile,
    AppState,
    LiveConnectConfig,
    UserProfile,
    derive_config,
    get_preset,
)
from .session import (
    ConnectionStatus,
    GreetingTrigger,
    LiveSession,
    ReconnectOutcome,
    SessionController,
    close_session,
    start_session,
)
from .transport import LiveTransport, SimulatedTransport

__all__ = [
    "__version__",
    "AgentProfile",
    "AppState",
    "ConnectionStatus",
    "GreetingTrigger",
    "LiveConnectConfig",
    "LiveSession",
    "LiveTransport",
    "ReconnectOutcome",
    "SessionController",
    "SimulatedTransport",
    "UserProfile",
    "close_session",
    "derive_config",
    "get_preset",
    "start_session",
]
