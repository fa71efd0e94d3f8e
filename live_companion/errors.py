"""Exception types for live sessions and user-facing CLI errors."""


class LiveSessionError(Exception):
    """Base class for live session failures."""


class TransportError(LiveSessionError):
    """Raised when the streaming transport fails an operation."""


class ConnectError(TransportError):
    """Raised when opening the streaming connection fails."""


class DisconnectError(TransportError):
    """Raised when closing the streaming connection fails."""


class CliUsageError(ValueError):
    """Base class for user-facing CLI configuration and usage errors."""


class UnknownPresetError(CliUsageError):
    """Raised when an agent preset id cannot be resolved."""

    def __init__(self, preset_id: str, available: list[str]) -> None:
        self.preset_id = preset_id
        super().__init__(
            f"Unknown agent preset '{preset_id}'. Available presets: {', '.join(available)}."
        )


class InvalidVoiceError(CliUsageError):
    """Raised when a voice name is not one of the prebuilt voices."""

    def __init__(self, voice: str, available: list[str]) -> None:
        self.voice = voice
        super().__init__(f"Invalid voice '{voice}'. Allowed values: {', '.join(available)}.")
