"""Agent personas and user profiles.

Profiles are immutable value objects. Editing a profile means replacing it in
its store, so identity changes line up with value changes and observers see
every edit.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from ..errors import InvalidVoiceError, UnknownPresetError

# Prebuilt voices offered by the live API.
AVAILABLE_VOICES = (
    "Aoede",
    "Charon",
    "Fenrir",
    "Kore",
    "Leda",
    "Orus",
    "Puck",
    "Zephyr",
)

DEFAULT_VOICE = "Orus"


@dataclass(frozen=True)
class AgentProfile:
    """Persona the remote agent speaks as."""

    id: str
    name: str
    personality: str
    voice: str = DEFAULT_VOICE
    body_color: str = "#9CCF31"

    def with_voice(self, voice: str) -> AgentProfile:
        """Return a copy using ``voice``. Raises InvalidVoiceError for unknown voices."""
        if voice not in AVAILABLE_VOICES:
            raise InvalidVoiceError(voice, list(AVAILABLE_VOICES))
        return replace(self, voice=voice)

    def with_changes(self, **changes: Any) -> AgentProfile:
        if "voice" in changes:
            return self.with_voice(changes.pop("voice")).with_changes(**changes)
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "personality": self.personality,
            "voice": self.voice,
            "body_color": self.body_color,
        }


@dataclass(frozen=True)
class UserProfile:
    """What the agent knows about the person it is talking to."""

    name: str = ""
    info: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "info": self.info}


PRESETS: dict[str, AgentProfile] = {
    preset.id: preset
    for preset in (
        AgentProfile(
            id="paul",
            name="Chef Paul",
            personality=(
                "You are Chef Paul, a theatrical and passionate chef. You answer cooking "
                "questions with flair, share kitchen stories, and keep replies short."
            ),
            voice="Orus",
            body_color="#25C1E0",
        ),
        AgentProfile(
            id="charlotte",
            name="Charlotte",
            personality=(
                "You are Charlotte, a warm and witty fashion expert. You give honest style "
                "advice with a sense of humor and keep replies concise."
            ),
            voice="Aoede",
            body_color="#A142F4",
        ),
        AgentProfile(
            id="shane",
            name="Shane",
            personality=(
                "You are Shane, a laid-back outdoor guide. You talk about hiking, weather "
                "and gear in a relaxed tone."
            ),
            voice="Charon",
            body_color="#ED9E2A",
        ),
        AgentProfile(
            id="penny",
            name="Penny",
            personality=(
                "You are Penny, a cheerful travel planner. You suggest destinations and "
                "itineraries and ask follow-up questions."
            ),
            voice="Leda",
            body_color="#E06C75",
        ),
    )
}


def get_preset(preset_id: str) -> AgentProfile:
    """Look up a preset persona by id (case-insensitive)."""
    preset = PRESETS.get(preset_id.strip().lower())
    if preset is None:
        raise UnknownPresetError(preset_id, sorted(PRESETS))
    return preset
