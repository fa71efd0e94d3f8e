"""CLI commands: config, presets, demo."""

from __future__ import annotations

import asyncio
from typing import Annotated

import typer

from ..config.settings import LiveSettings
from ..core.config import derive_config
from ..core.profiles import AVAILABLE_VOICES, PRESETS, UserProfile, get_preset
from ..errors import CliUsageError
from ..session import LiveSession, build_simulated_transport, close_session, start_session
from ..transport.simulated import SimulatedTransport
from ..ui.theme import THEME
from .formatting import _markup, format_config_yaml, presets_table, transport_log_lines
from .state import app, configure_logging, console

ConfigOption = Annotated[
    str | None,
    typer.Option("--config", "-c", help="YAML settings file"),
]
AgentOption = Annotated[
    str | None,
    typer.Option("--agent", "-a", help="Agent preset id (see `presets`)"),
]
GroundingOption = Annotated[
    bool | None,
    typer.Option("--grounding/--no-grounding", help="Enable search grounding"),
]
UserNameOption = Annotated[
    str | None,
    typer.Option("--user-name", help="User display name"),
]
LogLevelOption = Annotated[
    str | None,
    typer.Option("--log-level", help="Logging level (DEBUG, INFO, WARNING, ...)"),
]


def _load_settings(
    config: str | None,
    agent: str | None,
    grounding: bool | None,
    user_name: str | None,
    log_level: str | None,
) -> LiveSettings:
    try:
        settings = LiveSettings.load(config)
    except (FileNotFoundError, ValueError) as e:
        console.print(_markup(f"Settings error: {e}", THEME.error))
        raise typer.Exit(1) from e
    if agent is not None:
        settings.agent_preset = agent
    if grounding is not None:
        settings.use_grounding = grounding
    if user_name is not None:
        settings.user_name = user_name
    if log_level is not None:
        settings.log_level = log_level.upper()
    configure_logging(settings.log_level)
    return settings


@app.command()
def presets() -> None:
    """List agent presets and the prebuilt voices."""
    console.print(presets_table(PRESETS))
    console.print(_markup(f"Voices: {', '.join(AVAILABLE_VOICES)}", THEME.muted))


@app.command()
def config(
    config_path: ConfigOption = None,
    agent: AgentOption = None,
    grounding: GroundingOption = None,
    user_name: UserNameOption = None,
    log_level: LogLevelOption = None,
) -> None:
    """Print the live configuration derived from the current settings."""
    settings = _load_settings(config_path, agent, grounding, user_name, log_level)
    try:
        profile = get_preset(settings.agent_preset)
    except CliUsageError as e:
        console.print(_markup(str(e), THEME.error))
        raise typer.Exit(1) from e
    user = UserProfile(name=settings.user_name, info=settings.user_info)
    live_config = derive_config(profile, user, settings.use_grounding)
    console.print(_markup(f"model: {settings.model}", THEME.muted))
    console.print(format_config_yaml(live_config), markup=False, highlight=False)


@app.command()
def demo(
    config_path: ConfigOption = None,
    agent: AgentOption = None,
    grounding: GroundingOption = None,
    user_name: UserNameOption = None,
    log_level: LogLevelOption = None,
    voice: Annotated[
        str | None,
        typer.Option("--voice", "-v", help="Voice to switch to while connected"),
    ] = None,
    fail_connect: Annotated[
        bool,
        typer.Option("--fail-connect", help="Make the last reconnect fail"),
    ] = False,
) -> None:
    """Run a scripted session against the simulated transport."""
    settings = _load_settings(config_path, agent, grounding, user_name, log_level)
    try:
        transport = build_simulated_transport(settings)
        session = LiveSession.from_settings(settings, transport)
        if voice is not None:
            # Validate before the session starts.
            session.state.agent.current.with_voice(voice)
    except CliUsageError as e:
        console.print(_markup(str(e), THEME.error))
        raise typer.Exit(1) from e

    asyncio.run(_run_demo(session, transport, voice=voice, fail_connect=fail_connect))


def _print_status(session: LiveSession, step: str) -> None:
    status = session.controller.status
    color = THEME.connected if session.transport.connected else THEME.disconnected
    console.print(f"{_markup(f'{step:<24}', THEME.primary)} {_markup(str(status), color)}")


async def _run_demo(
    session: LiveSession,
    transport: SimulatedTransport,
    *,
    voice: str | None,
    fail_connect: bool,
) -> None:
    state = session.state
    controller = session.controller

    await start_session(session)
    try:
        await controller.connect()
        await controller.wait_idle()
        _print_status(session, "connect")

        if voice is not None:
            state.agent.update(voice=voice)
            await controller.wait_idle()
            _print_status(session, f"voice -> {voice}")

        state.ui.set_show_agent_edit(True)
        await controller.wait_idle()
        _print_status(session, "agent edit opened")

        state.ui.set_show_agent_edit(False)
        await controller.wait_idle()
        _print_status(session, "agent edit closed")

        if fail_connect:
            transport.fail_next_connect()
            state.ui.toggle_grounding()
            await controller.wait_idle()
            _print_status(session, "grounding toggled")
    finally:
        await close_session(session)

    console.print()
    for line in transport_log_lines(transport):
        console.print(line)
