"""Live connection configuration derived from profiles and UI toggles."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .profiles import AgentProfile, UserProfile
from .prompts import create_system_instructions

AUDIO_MODALITY = "AUDIO"

# Search grounding capability as the live API expects it in ``tools``.
GOOGLE_SEARCH_TOOL = "googleSearch"

# Type for prompt construction: (agent, user) -> system instruction text
PromptBuilder = Callable[[AgentProfile, UserProfile], str]


@dataclass(frozen=True)
class LiveConnectConfig:
    """Desired configuration of the live session.

    Frozen and built only from hashable fields, so ``==`` is structural
    equality over every field. ``to_dict()`` renders the nested wire shape
    handed to the transport.
    """

    voice: str
    system_instruction: str
    tools: tuple[str, ...] = ()
    response_modalities: tuple[str, ...] = (AUDIO_MODALITY,)

    @property
    def grounding(self) -> bool:
        return GOOGLE_SEARCH_TOOL in self.tools

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "responseModalities": list(self.response_modalities),
            "speechConfig": {
                "voiceConfig": {
                    "prebuiltVoiceConfig": {"voiceName": self.voice},
                },
            },
            "systemInstruction": {
                "parts": [{"text": self.system_instruction}],
            },
        }
        if self.tools:
            data["tools"] = [{tool: {}} for tool in self.tools]
        return data


def derive_config(
    agent: AgentProfile,
    user: UserProfile,
    grounding_enabled: bool,
    *,
    prompt_builder: PromptBuilder = create_system_instructions,
) -> LiveConnectConfig:
    """Build the desired live configuration. Pure; call it on every evaluation."""
    return LiveConnectConfig(
        voice=agent.voice,
        system_instruction=prompt_builder(agent, user),
        tools=(GOOGLE_SEARCH_TOOL,) if grounding_enabled else (),
    )
