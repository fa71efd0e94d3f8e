"""Tests for the session lifecycle controller."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

import pytest

from live_companion.core.config import derive_config
from live_companion.core.events import GREETING_PROMPT, RECONNECT_ERROR_MESSAGE, ErrorEvent
from live_companion.core.profiles import PRESETS, AgentProfile, UserProfile
from live_companion.core.state import AppState
from live_companion.errors import ConnectError
from live_companion.session.controller import SessionController
from live_companion.session.greeting import GreetingTrigger
from live_companion.session.models import Decision, ReconnectOutcome
from live_companion.transport.simulated import SimulatedTransport


def _prompt(agent: AgentProfile, user: UserProfile) -> str:
    return f"{agent.name} talking to {user.name}"


def _build(**kwargs) -> tuple[AppState, SimulatedTransport, SessionController, GreetingTrigger]:
    state = AppState.create(agent=PRESETS["paul"], user=UserProfile(name="Ada"))
    transport = SimulatedTransport()
    greeting = GreetingTrigger(transport)
    controller = SessionController(state, transport, prompt_builder=_prompt, **kwargs)
    return state, transport, controller, greeting


async def _connected(**kwargs) -> tuple[AppState, SimulatedTransport, SessionController, GreetingTrigger]:
    state, transport, controller, greeting = _build(**kwargs)
    greeting.start()
    controller.start()
    assert await controller.connect() == ReconnectOutcome.CONNECTED
    await controller.wait_idle()
    assert transport.connected
    transport.calls.clear()
    transport.sent.clear()
    return state, transport, controller, greeting


async def _until(predicate: Callable[[], bool]) -> None:
    for _ in range(100):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition not reached")


@pytest.mark.asyncio
async def test_voice_change_reconnects_once_and_greets_once() -> None:
    state, transport, controller, greeting = await _connected()

    state.agent.update(voice="Kore")
    await controller.wait_idle()

    assert transport.ops() == ["disconnect", "connect"]
    assert transport.calls[1].config is not None
    assert transport.calls[1].config.voice == "Kore"
    assert transport.connected
    assert transport.sent == [({"text": GREETING_PROMPT}, True)]
    assert greeting.greetings_sent == 2  # initial connect + reconnect


@pytest.mark.asyncio
async def test_voice_set_back_before_evaluation_does_not_reconnect() -> None:
    state, transport, controller, _ = await _connected()

    state.agent.update(voice="Kore")
    state.agent.update(voice="Orus")
    await controller.wait_idle()

    assert transport.ops() == []
    assert transport.connected


@pytest.mark.asyncio
async def test_second_reconnect_while_in_flight_is_a_noop() -> None:
    _, transport, controller, _ = await _connected()
    config = controller.derive()

    transport.hold()
    first = asyncio.create_task(controller.reconnect(config))
    await _until(lambda: transport.count("disconnect") == 1)
    assert controller.reconnecting

    assert await controller.reconnect(config) == ReconnectOutcome.SKIPPED

    transport.release()
    assert await first == ReconnectOutcome.CONNECTED
    await controller.wait_idle()

    assert transport.ops() == ["disconnect", "connect"]
    assert not controller.reconnecting


@pytest.mark.asyncio
async def test_no_connect_while_modal_open() -> None:
    state, transport, controller, _ = await _connected()

    state.ui.set_show_agent_edit(True)
    await controller.wait_idle()
    state.agent.update(voice="Kore")
    await controller.wait_idle()
    state.ui.toggle_grounding()
    state.user.update(name="Grace")
    await controller.wait_idle()
    state.agent.update(voice="Puck")
    await controller.wait_idle()

    assert transport.count("connect") == 0
    assert not transport.connected
    assert controller.pending_reconnect


@pytest.mark.asyncio
async def test_closing_modal_restores_connection() -> None:
    state, transport, controller, _ = await _connected()

    state.ui.set_show_user_config(True)
    await controller.wait_idle()
    assert not transport.connected
    assert controller.pending_reconnect

    state.ui.set_show_user_config(False)
    await controller.wait_idle()

    assert transport.connected
    assert transport.ops() == ["disconnect", "connect"]
    assert not controller.pending_reconnect
    assert transport.sent == [({"text": GREETING_PROMPT}, True)]


@pytest.mark.asyncio
async def test_modal_opened_during_disconnect_aborts_connect() -> None:
    state, transport, controller, _ = await _connected()

    transport.hold()
    state.agent.update(voice="Kore")
    await _until(lambda: transport.count("disconnect") == 1)

    state.ui.set_show_agent_edit(True)
    await _until(lambda: controller.pending_reconnect)

    transport.release()
    await controller.wait_idle()

    assert not transport.connected
    assert transport.count("connect") == 0

    state.ui.set_show_agent_edit(False)
    await controller.wait_idle()

    assert transport.connected
    assert transport.config is not None
    assert transport.config.voice == "Kore"


@pytest.mark.asyncio
async def test_connect_failure_emits_single_error_event() -> None:
    state, transport, controller, _ = await _connected()
    errors: list[ErrorEvent] = []
    transport.on("error", errors.append)

    transport.fail_next_connect()
    state.agent.update(voice="Kore")
    await controller.wait_idle()

    assert len(errors) == 1
    assert errors[0].message == RECONNECT_ERROR_MESSAGE
    assert isinstance(errors[0].error, ConnectError)
    assert not transport.connected
    assert not controller.reconnecting

    # Guard was released, so a manual retry goes through.
    assert await controller.connect() == ReconnectOutcome.CONNECTED


@pytest.mark.asyncio
async def test_disconnect_failure_on_modal_open_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING, logger="live_companion")
    state, transport, controller, _ = await _connected()

    transport.fail_next_disconnect()
    state.ui.set_show_agent_edit(True)
    await controller.wait_idle()

    assert "Failed to disconnect on modal open" in caplog.text
    assert transport.connected
    assert controller.pending_reconnect


@pytest.mark.asyncio
async def test_settings_changed_mid_reconnect_are_applied() -> None:
    state, transport, controller, _ = await _connected()

    transport.hold()
    state.agent.update(voice="Kore")
    await _until(lambda: transport.count("disconnect") == 1)
    state.agent.update(voice="Leda")
    await _until(lambda: controller.derive() == state.config.config)

    transport.release()
    await controller.wait_idle()

    assert transport.ops() == ["disconnect", "connect", "disconnect", "connect"]
    assert transport.config is not None
    assert transport.config.voice == "Leda"


@pytest.mark.asyncio
async def test_settle_delay_absorbs_modal_flicker() -> None:
    state, transport, controller, _ = await _connected(settle_delay=0.01)

    state.ui.set_show_agent_edit(True)
    state.ui.set_show_agent_edit(False)
    await controller.wait_idle()

    assert transport.ops() == []
    assert transport.connected


@pytest.mark.asyncio
async def test_evaluate_always_publishes_latest_config() -> None:
    state, transport, controller, _ = _build()

    steps: list[Callable[[], None]] = [
        lambda: None,
        lambda: state.agent.update(voice="Kore"),
        lambda: state.ui.set_use_grounding(True),
        lambda: state.ui.set_show_agent_edit(True),
        lambda: state.user.update(name="Grace", info="Likes jazz"),
        lambda: state.agent.set_current(PRESETS["charlotte"]),
        lambda: state.ui.set_show_agent_edit(False),
    ]
    for step in steps:
        step()
        decision = controller.evaluate()
        expected = derive_config(
            state.agent.current,
            state.user.profile,
            state.ui.use_grounding,
            prompt_builder=_prompt,
        )
        assert state.config.config == expected
        assert decision in (Decision.NONE, Decision.SUPPRESSED)

    assert transport.ops() == []


@pytest.mark.asyncio
async def test_modal_open_while_disconnected_is_suppressed() -> None:
    state, transport, controller, _ = _build()
    state.ui.set_show_user_config(True)

    assert controller.evaluate() == Decision.SUPPRESSED
    assert not controller.pending_reconnect
    assert transport.ops() == []


@pytest.mark.asyncio
async def test_close_disconnects_and_detaches() -> None:
    state, transport, controller, _ = await _connected()

    await controller.close()
    assert not transport.connected

    state.agent.update(voice="Kore")
    await asyncio.sleep(0)
    assert transport.ops() == ["disconnect"]


@pytest.mark.asyncio
async def test_stop_closes_session_and_ignores_later_changes() -> None:
    state, transport, controller, _ = await _connected()

    await controller.disconnect()
    state.agent.update(voice="Kore")
    await controller.wait_idle()

    assert not transport.connected
    assert transport.ops() == ["disconnect"]


@pytest.mark.asyncio
async def test_stop_during_reconnect_connect_leaves_session_closed() -> None:
    state, transport, controller, _ = await _connected()

    transport.hold("connect")
    state.agent.update(voice="Kore")
    await _until(lambda: transport.count("connect") == 1)
    assert controller.reconnecting
    assert not transport.connected

    await controller.disconnect()
    transport.release()
    await controller.wait_idle()

    assert not transport.connected
    assert transport.ops() == ["disconnect", "connect", "disconnect"]
    assert not controller.pending_reconnect

    assert await controller.connect() == ReconnectOutcome.CONNECTED
    assert transport.connected


@pytest.mark.asyncio
async def test_stop_during_reconnect_disconnect_skips_connect() -> None:
    state, transport, controller, _ = await _connected()

    transport.hold("disconnect")
    state.agent.update(voice="Kore")
    await _until(lambda: transport.count("disconnect") == 1)

    stop = asyncio.create_task(controller.disconnect())
    await asyncio.sleep(0)
    transport.release()
    await stop
    await controller.wait_idle()

    assert not transport.connected
    assert transport.count("connect") == 0
