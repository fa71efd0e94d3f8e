"""Settings for live sessions."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

# Default paths
DEFAULT_CONFIG_DIR = Path.home() / ".config" / "live-companion"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "settings.yaml"

DEFAULT_MODEL = "models/gemini-2.0-flash-exp"

_TRUTHY = ("1", "true", "yes", "on")


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUTHY


@dataclass
class TransportSettings:
    """Simulated transport behavior."""

    latency: float = 0.0
    fail_next_connect: bool = False


@dataclass
class LiveSettings:
    """Main live session settings."""

    model: str = DEFAULT_MODEL
    agent_preset: str = "paul"
    user_name: str = ""
    user_info: str = ""
    use_grounding: bool = False
    settle_delay: float = 0.0
    log_level: str = "WARNING"
    transport: TransportSettings = field(default_factory=TransportSettings)
    extras: dict[str, Any] = field(default_factory=dict)

    # Known top-level keys (for separating known from extras on YAML load)
    _KNOWN_FIELDS = frozenset(
        {
            "model",
            "agent_preset",
            "user_name",
            "user_info",
            "use_grounding",
            "settle_delay",
            "log_level",
            "transport",
        }
    )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LiveSettings:
        """Create settings from a dictionary (e.g., parsed YAML)."""
        data = data.get("live", data)
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError("The 'live' settings section must be a mapping")

        transport = TransportSettings()
        if "transport" in data and isinstance(data["transport"], dict):
            transport_data = data["transport"]
            transport.latency = float(transport_data.get("latency", 0.0))
            transport.fail_next_connect = _parse_bool(
                transport_data.get("fail_next_connect", False)
            )

        extras = {k: v for k, v in data.items() if k not in cls._KNOWN_FIELDS}

        return cls(
            model=str(data.get("model", DEFAULT_MODEL)),
            agent_preset=str(data.get("agent_preset", "paul")),
            user_name=str(data.get("user_name", "")),
            user_info=str(data.get("user_info", "")),
            use_grounding=_parse_bool(data.get("use_grounding", False)),
            settle_delay=float(data.get("settle_delay", 0.0)),
            log_level=str(data.get("log_level", "WARNING")).upper(),
            transport=transport,
            extras=extras,
        )

    @classmethod
    def from_yaml(cls, path: str | Path) -> LiveSettings:
        """Load settings from a YAML file."""
        path = Path(path).expanduser()
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if data is not None and not isinstance(data, dict):
            raise ValueError(f"Config file must contain a YAML mapping: {path}")
        return cls.from_dict(data or {})

    @classmethod
    def from_env(cls, env: dict[str, str] | None = None) -> LiveSettings:
        """Create settings from LIVE_COMPANION_* environment variables."""
        env = dict(os.environ) if env is None else env
        return cls(
            model=env.get("LIVE_COMPANION_MODEL", DEFAULT_MODEL),
            agent_preset=env.get("LIVE_COMPANION_AGENT", "paul"),
            user_name=env.get("LIVE_COMPANION_USER_NAME", ""),
            user_info=env.get("LIVE_COMPANION_USER_INFO", ""),
            use_grounding=_parse_bool(env.get("LIVE_COMPANION_GROUNDING", "")),
            settle_delay=float(env.get("LIVE_COMPANION_SETTLE_DELAY", "0") or 0),
            log_level=env.get("LIVE_COMPANION_LOG_LEVEL", "WARNING").upper(),
            transport=TransportSettings(
                latency=float(env.get("LIVE_COMPANION_TRANSPORT_LATENCY", "0") or 0),
            ),
        )

    @classmethod
    def load(
        cls,
        config_path: str | None = None,
        env: dict[str, str] | None = None,
    ) -> LiveSettings:
        """Load settings with precedence: explicit path > env path > default file > env vars.

        Args:
            config_path: Explicit path to a settings file (highest precedence).
            env: Environment mapping; defaults to ``os.environ``.

        Returns:
            Loaded live settings.
        """
        env = dict(os.environ) if env is None else env
        if config_path:
            return cls.from_yaml(config_path)

        env_path = env.get("LIVE_COMPANION_CONFIG")
        if env_path:
            return cls.from_yaml(env_path)

        if DEFAULT_CONFIG_FILE.exists():
            return cls.from_yaml(DEFAULT_CONFIG_FILE)

        return cls.from_env(env)
