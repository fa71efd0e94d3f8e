"""Display helpers for CLI output."""

from __future__ import annotations

from typing import Any

import yaml
from rich.markup import escape
from rich.table import Table

from ..core.config import LiveConnectConfig
from ..core.events import ErrorEvent
from ..core.profiles import AgentProfile
from ..transport.simulated import SimulatedTransport
from ..ui.theme import THEME


def _markup(text: str, color: str) -> str:
    """Wrap text in Rich markup with the given color, escaping special chars."""
    return f"[{color}]{escape(text)}[/{color}]"


def format_config_yaml(config: LiveConnectConfig) -> str:
    """Render the wire-shaped config as YAML."""
    return yaml.safe_dump(config.to_dict(), default_flow_style=False, sort_keys=False)


def presets_table(presets: dict[str, AgentProfile]) -> Table:
    table = Table(show_header=True, header_style=THEME.secondary)
    table.add_column("id")
    table.add_column("name")
    table.add_column("voice")
    for preset in presets.values():
        table.add_row(preset.id, preset.name, preset.voice)
    return table


def describe_payload(payload: Any) -> str:
    if isinstance(payload, ErrorEvent):
        return payload.message
    return str(payload)


def transport_log_lines(transport: SimulatedTransport) -> list[str]:
    """One marked-up line per recorded call, sent message and emitted event."""
    lines: list[str] = []
    for call in transport.calls:
        if call.config is not None:
            detail = f"{call.op} voice={call.config.voice} grounding={call.config.grounding}"
        else:
            detail = call.op
        lines.append(_markup(detail, THEME.transport_call))
    for message, end_of_turn in transport.sent:
        lines.append(
            _markup(f"send {message.get('text', '')!r} end_of_turn={end_of_turn}", THEME.sent_message)
        )
    for event_name, payload in transport.emitted:
        lines.append(_markup(f"{event_name}: {describe_payload(payload)}", THEME.error))
    return lines
