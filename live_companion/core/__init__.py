"""Core live-session API: profiles, derived config, observable state."""

from __future__ import annotations

from .config import LiveConnectConfig, PromptBuilder, derive_config
from .events import ERROR_EVENT, GREETING_PROMPT, RECONNECT_ERROR_MESSAGE, ErrorEvent
from .profiles import AVAILABLE_VOICES, PRESETS, AgentProfile, UserProfile, get_preset
from .prompts import create_system_instructions
from .state import AgentStore, AppState, ConfigSink, UIStore, UserStore

__all__ = [
    "AVAILABLE_VOICES",
    "AgentProfile",
    "AgentStore",
    "AppState",
    "ConfigSink",
    "ERROR_EVENT",
    "ErrorEvent",
    "GREETING_PROMPT",
    "LiveConnectConfig",
    "PRESETS",
    "PromptBuilder",
    "RECONNECT_ERROR_MESSAGE",
    "UIStore",
    "UserProfile",
    "UserStore",
    "create_system_instructions",
    "derive_config",
    "get_preset",
]
