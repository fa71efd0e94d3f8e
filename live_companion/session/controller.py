"""Session lifecycle controller for the live connection.

The controller re-runs one decision function whenever a watched input
changes (agent persona, user profile, grounding toggle, modal flags,
connection status) and decides whether to leave the connection alone, close
it, or close and reopen it with a new configuration.

Decisions are synchronous. The only suspension points are the transport's
``connect`` and ``disconnect`` calls, which run in background tasks. Every
value read after one of those awaits comes from the stores, never from a
snapshot taken before it.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

from ..core.config import LiveConnectConfig, PromptBuilder, derive_config
from ..core.events import ERROR_EVENT, RECONNECT_ERROR_MESSAGE, ErrorEvent
from ..core.prompts import create_system_instructions
from ..core.state import AppState
from ..transport.protocol import LiveTransport
from .guard import ReconnectGuard
from .models import ConnectionStatus, Decision, ReconnectOutcome

logger = logging.getLogger(__name__)


class SessionController:
    """Keeps the live connection in line with application and UI state.

    Usage::

        controller = SessionController(state, transport)
        controller.start()          # subscribe + initial evaluation
        state.agent.update(voice="Kore")  # reconnects with the new voice
        await controller.wait_idle()
        await controller.close()

    Only this controller may call ``connect``/``disconnect`` on the transport
    while it is started.
    """

    def __init__(
        self,
        state: AppState,
        transport: LiveTransport,
        *,
        prompt_builder: PromptBuilder = create_system_instructions,
        settle_delay: float = 0.0,
    ) -> None:
        self._state = state
        self._transport = transport
        self._prompt_builder = prompt_builder
        self._settle_delay = max(0.0, settle_delay)
        self._guard = ReconnectGuard()
        self._pending_reconnect = False
        self._stop_requested = False
        self._loop: asyncio.AbstractEventLoop | None = None
        self._scheduled: asyncio.Handle | None = None
        self._tasks: set[asyncio.Task[Any]] = set()
        self._disconnect_task: asyncio.Task[None] | None = None
        self._started = False

    # --- Introspection ---

    @property
    def pending_reconnect(self) -> bool:
        """True when a reconnect is owed once the settings modals close."""
        return self._pending_reconnect

    @property
    def reconnecting(self) -> bool:
        return self._guard.held

    @property
    def status(self) -> ConnectionStatus:
        return ConnectionStatus.from_flag(self._transport.connected)

    # --- Subscription ---

    def start(self) -> None:
        """Subscribe to every watched input and run the initial evaluation.

        Must be called from a running event loop.
        """
        if self._started:
            return
        self._loop = asyncio.get_running_loop()
        self._state.agent.add_observer(self._on_store_change)
        self._state.user.add_observer(self._on_store_change)
        self._state.ui.add_observer(self._on_store_change)
        self._transport.add_status_observer(self._on_status_change)
        self._started = True
        self.evaluate()

    def stop(self) -> None:
        """Unsubscribe and cancel scheduled evaluations and background tasks."""
        if not self._started:
            return
        self._state.agent.remove_observer(self._on_store_change)
        self._state.user.remove_observer(self._on_store_change)
        self._state.ui.remove_observer(self._on_store_change)
        self._transport.remove_status_observer(self._on_status_change)
        self._started = False
        if self._scheduled is not None:
            self._scheduled.cancel()
            self._scheduled = None
        for task in list(self._tasks):
            task.cancel()

    async def close(self) -> None:
        """Stop reacting to changes and close the connection if it is open."""
        tasks = list(self._tasks)
        self.stop()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        if self._transport.connected:
            try:
                await self._transport.disconnect()
            except Exception:
                logger.warning("Failed to disconnect live session on close", exc_info=True)

    async def wait_idle(self) -> None:
        """Wait until no evaluation is scheduled and no background task is running."""
        while self._tasks or self._scheduled is not None:
            if self._tasks:
                await asyncio.gather(*list(self._tasks), return_exceptions=True)
            else:
                await asyncio.sleep(self._settle_delay)

    def _on_store_change(self, field_name: str) -> None:
        logger.debug("State change (%s); scheduling evaluation", field_name)
        self.request_evaluation()

    def _on_status_change(self, connected: bool) -> None:
        logger.debug("Connection status is now %s", ConnectionStatus.from_flag(connected))
        self.request_evaluation()

    def request_evaluation(self) -> None:
        """Schedule one evaluation, coalescing requests made before it runs.

        With a non-zero ``settle_delay`` each new request pushes the
        evaluation back, so a modal that flickers open and closed within the
        delay never costs a reconnect.
        """
        if self._loop is None or not self._started:
            return
        if self._scheduled is not None:
            if self._settle_delay <= 0:
                return
            self._scheduled.cancel()
        if self._settle_delay > 0:
            self._scheduled = self._loop.call_later(self._settle_delay, self._run_scheduled)
        else:
            self._scheduled = self._loop.call_soon(self._run_scheduled)

    def _run_scheduled(self) -> None:
        self._scheduled = None
        self.evaluate()

    # --- Decision ---

    def derive(self) -> LiveConnectConfig:
        """Derive the desired configuration from the current store values."""
        return derive_config(
            self._state.agent.current,
            self._state.user.profile,
            self._state.ui.use_grounding,
            prompt_builder=self._prompt_builder,
        )

    def evaluate(self) -> Decision:
        """Run the connect/disconnect/reconnect decision against current state."""
        new_config = self.derive()
        last_applied = self._state.config.config
        # Published before any decision so readers never see a stale config.
        self._state.config.publish(new_config)
        config_changed = new_config != last_applied
        connected = self._transport.connected

        if self._state.ui.modal_open:
            if not connected:
                return Decision.SUPPRESSED
            self._pending_reconnect = True
            self._force_disconnect()
            return Decision.DISCONNECT

        if self._pending_reconnect or (connected and config_changed):
            self._pending_reconnect = False
            self._spawn(self.reconnect(new_config), name="live-reconnect").add_done_callback(
                _log_unhandled_reconnect_error
            )
            return Decision.RECONNECT

        return Decision.NONE

    def _force_disconnect(self) -> None:
        if self._disconnect_task is not None and not self._disconnect_task.done():
            return
        logger.info("Settings modal opened; disconnecting live session")
        task = self._spawn(self._transport.disconnect(), name="live-modal-disconnect")
        task.add_done_callback(_log_disconnect_failure)
        self._disconnect_task = task

    def _spawn(self, coro: Coroutine[Any, Any, Any], *, name: str) -> asyncio.Task[Any]:
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    # --- User-initiated start/stop ---

    async def connect(self) -> ReconnectOutcome:
        """Open the session with the current configuration (the "play" button)."""
        config = self.derive()
        self._state.config.publish(config)
        self._pending_reconnect = False
        self._stop_requested = False
        return await self.reconnect(config)

    async def disconnect(self) -> None:
        """Close the session and drop any owed reconnect (the "stop" button).

        A reconnect still in flight sees the stop after its next await and
        leaves the session closed.
        """
        self._pending_reconnect = False
        self._stop_requested = True
        if not self._transport.connected:
            return
        try:
            await self._transport.disconnect()
        except Exception:
            logger.warning("Failed to disconnect live session", exc_info=True)

    # --- Reconnect ---

    async def reconnect(self, new_config: LiveConnectConfig) -> ReconnectOutcome:
        """Close the connection if open, then reopen it with ``new_config``.

        A no-op while another reconnect holds the guard. Failures are logged
        and surfaced as one ``"error"`` event on the transport; they are never
        raised.
        """
        with self._guard.attempt() as acquired:
            if not acquired:
                logger.debug("Reconnect already in progress; skipping")
                return ReconnectOutcome.SKIPPED
            outcome = await self._reconnect_locked(new_config)
        if self._pending_reconnect:
            self.request_evaluation()
        return outcome

    async def _reconnect_locked(self, new_config: LiveConnectConfig) -> ReconnectOutcome:
        try:
            if self._stop_requested:
                logger.debug("Session stopped; not reconnecting")
                return ReconnectOutcome.ABORTED

            if self._transport.connected:
                logger.info("Disconnecting live session to apply new settings")
                await self._transport.disconnect()

            if self._stop_requested:
                logger.debug("Session stopped during disconnect; not reconnecting")
                return ReconnectOutcome.ABORTED

            if self._state.ui.modal_open:
                # Restored by the evaluation that follows the modal closing.
                logger.debug("Settings modal opened during disconnect; not reconnecting")
                self._pending_reconnect = True
                return ReconnectOutcome.ABORTED

            logger.info(
                "Connecting live session (voice=%s, grounding=%s)",
                new_config.voice,
                new_config.grounding,
            )
            await self._transport.connect(new_config)

            if self._stop_requested:
                logger.info("Session stopped while connecting; closing it again")
                await self._transport.disconnect()
                return ReconnectOutcome.ABORTED
        except Exception as exc:
            logger.exception("Failed to reconnect live session")
            self._transport.emit(
                ERROR_EVENT, ErrorEvent(message=RECONNECT_ERROR_MESSAGE, error=exc)
            )
            return ReconnectOutcome.FAILED

        latest = self._state.config.config
        if latest is not None and latest != new_config:
            logger.debug("Settings changed while connecting; another reconnect is owed")
            self._pending_reconnect = True
        return ReconnectOutcome.CONNECTED


def _log_disconnect_failure(task: asyncio.Task[None]) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.warning("Failed to disconnect on modal open: %s", exc)


def _log_unhandled_reconnect_error(task: asyncio.Task[Any]) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Unhandled error during reconnect", exc_info=exc)
