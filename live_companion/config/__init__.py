"""Configuration module for live-companion."""

from .settings import DEFAULT_CONFIG_FILE, LiveSettings, TransportSettings

__all__ = ["DEFAULT_CONFIG_FILE", "LiveSettings", "TransportSettings"]
