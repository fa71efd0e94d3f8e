"""Centralized CLI theme tokens."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CliTheme:
    """Semantic Rich color tokens for CLI output."""

    primary: str = "#E6EDF3"
    secondary: str = "#56B6C2"
    muted: str = "#7F848E"
    error: str = "#E06C75"
    connected: str = "#98C379"
    disconnected: str = "#7F848E"
    transport_call: str = "#61AFEF"
    sent_message: str = "#ABB2BF"


THEME = CliTheme()
