"""Observable application state: profiles, UI flags, and the shared config sink.

Each store notifies its observers synchronously on every mutation that
changes a value. Observers are side channels: a failing observer is logged
and never blocks the mutation or the remaining observers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .config import LiveConnectConfig
from .events import ChangeCallback
from .profiles import PRESETS, AgentProfile, UserProfile

logger = logging.getLogger(__name__)


class ObservableStore:
    """Base class holding the observer list for a store."""

    def __init__(self) -> None:
        self._observers: list[ChangeCallback] = []

    # --- Observer management ---

    def add_observer(self, observer: ChangeCallback) -> None:
        """Attach an observer called with the changed field name."""
        self._observers.append(observer)

    def remove_observer(self, observer: ChangeCallback) -> None:
        """Detach an observer."""
        self._observers.remove(observer)

    def _emit(self, field_name: str) -> None:
        for obs in list(self._observers):
            try:
                obs(field_name)
            except Exception:
                logger.exception(
                    "%s observer failed on %s change", type(self).__name__, field_name
                )


class AgentStore(ObservableStore):
    """Holds the active agent persona."""

    def __init__(self, current: AgentProfile | None = None) -> None:
        super().__init__()
        self._current = current or PRESETS["paul"]

    @property
    def current(self) -> AgentProfile:
        return self._current

    def set_current(self, agent: AgentProfile) -> None:
        if agent == self._current:
            return
        self._current = agent
        self._emit("current")

    def update(self, **changes: object) -> None:
        """Apply field edits (e.g. ``voice="Kore"``) to the active persona."""
        self.set_current(self._current.with_changes(**changes))


class UserStore(ObservableStore):
    """Holds the user profile."""

    def __init__(self, profile: UserProfile | None = None) -> None:
        super().__init__()
        self._profile = profile or UserProfile()

    @property
    def profile(self) -> UserProfile:
        return self._profile

    def set_profile(self, profile: UserProfile) -> None:
        if profile == self._profile:
            return
        self._profile = profile
        self._emit("profile")

    def update(self, *, name: str | None = None, info: str | None = None) -> None:
        self.set_profile(
            UserProfile(
                name=self._profile.name if name is None else name,
                info=self._profile.info if info is None else info,
            )
        )


class UIStore(ObservableStore):
    """Transient UI flags: the two settings modals and the grounding toggle."""

    def __init__(
        self,
        *,
        show_agent_edit: bool = False,
        show_user_config: bool = False,
        use_grounding: bool = False,
    ) -> None:
        super().__init__()
        self._show_agent_edit = show_agent_edit
        self._show_user_config = show_user_config
        self._use_grounding = use_grounding

    @property
    def show_agent_edit(self) -> bool:
        return self._show_agent_edit

    @property
    def show_user_config(self) -> bool:
        return self._show_user_config

    @property
    def use_grounding(self) -> bool:
        return self._use_grounding

    @property
    def modal_open(self) -> bool:
        """True while any settings-editing modal is open."""
        return self._show_agent_edit or self._show_user_config

    def set_show_agent_edit(self, value: bool) -> None:
        if value == self._show_agent_edit:
            return
        self._show_agent_edit = value
        self._emit("show_agent_edit")

    def set_show_user_config(self, value: bool) -> None:
        if value == self._show_user_config:
            return
        self._show_user_config = value
        self._emit("show_user_config")

    def set_use_grounding(self, value: bool) -> None:
        if value == self._use_grounding:
            return
        self._use_grounding = value
        self._emit("use_grounding")

    def toggle_grounding(self) -> None:
        self.set_use_grounding(not self._use_grounding)


class ConfigSink(ObservableStore):
    """Shared place holding the most recently derived live configuration."""

    def __init__(self) -> None:
        super().__init__()
        self._config: LiveConnectConfig | None = None

    @property
    def config(self) -> LiveConnectConfig | None:
        return self._config

    def publish(self, config: LiveConnectConfig) -> bool:
        """Store ``config``. Returns True (and notifies) when it differs from the last one."""
        if config == self._config:
            self._config = config
            return False
        self._config = config
        self._emit("config")
        return True


@dataclass
class AppState:
    """The stores a live session is wired to."""

    agent: AgentStore = field(default_factory=AgentStore)
    user: UserStore = field(default_factory=UserStore)
    ui: UIStore = field(default_factory=UIStore)
    config: ConfigSink = field(default_factory=ConfigSink)

    @classmethod
    def create(
        cls,
        *,
        agent: AgentProfile | None = None,
        user: UserProfile | None = None,
        use_grounding: bool = False,
    ) -> AppState:
        return cls(
            agent=AgentStore(agent),
            user=UserStore(user),
            ui=UIStore(use_grounding=use_grounding),
        )

