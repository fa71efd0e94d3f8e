"""Tests for settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from live_companion.config import settings as settings_module
from live_companion.config.settings import DEFAULT_MODEL, LiveSettings


def test_from_yaml_reads_nested_transport_and_extras(tmp_path: Path):
    path = tmp_path / "settings.yaml"
    path.write_text(
        """
agent_preset: charlotte
user_name: Ada
use_grounding: "yes"
settle_delay: 0.25
log_level: debug
transport:
  latency: 0.5
  fail_next_connect: true
theme: dark
""",
        encoding="utf-8",
    )

    settings = LiveSettings.from_yaml(path)

    assert settings.agent_preset == "charlotte"
    assert settings.user_name == "Ada"
    assert settings.use_grounding is True
    assert settings.settle_delay == 0.25
    assert settings.log_level == "DEBUG"
    assert settings.transport.latency == 0.5
    assert settings.transport.fail_next_connect is True
    assert settings.extras == {"theme": "dark"}
    assert settings.model == DEFAULT_MODEL


def test_from_dict_accepts_live_section():
    settings = LiveSettings.from_dict({"live": {"agent_preset": "penny", "model": "m"}})
    assert settings.agent_preset == "penny"
    assert settings.model == "m"


def test_from_yaml_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        LiveSettings.from_yaml(tmp_path / "missing.yaml")


def test_from_yaml_rejects_non_mapping(tmp_path: Path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        LiveSettings.from_yaml(path)


def test_from_yaml_empty_file_uses_defaults(tmp_path: Path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    settings = LiveSettings.from_yaml(path)
    assert settings.agent_preset == "paul"
    assert not settings.use_grounding


def test_from_env():
    settings = LiveSettings.from_env(
        {
            "LIVE_COMPANION_AGENT": "shane",
            "LIVE_COMPANION_GROUNDING": "1",
            "LIVE_COMPANION_SETTLE_DELAY": "0.1",
            "LIVE_COMPANION_LOG_LEVEL": "info",
            "LIVE_COMPANION_TRANSPORT_LATENCY": "0.2",
        }
    )
    assert settings.agent_preset == "shane"
    assert settings.use_grounding
    assert settings.settle_delay == 0.1
    assert settings.log_level == "INFO"
    assert settings.transport.latency == 0.2


def test_load_precedence(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(settings_module, "DEFAULT_CONFIG_FILE", tmp_path / "absent.yaml")
    explicit = tmp_path / "explicit.yaml"
    explicit.write_text("agent_preset: penny\n", encoding="utf-8")
    from_env_path = tmp_path / "env.yaml"
    from_env_path.write_text("agent_preset: shane\n", encoding="utf-8")
    env = {"LIVE_COMPANION_CONFIG": str(from_env_path), "LIVE_COMPANION_AGENT": "charlotte"}

    assert LiveSettings.load(str(explicit), env=env).agent_preset == "penny"
    assert LiveSettings.load(env=env).agent_preset == "shane"
    assert LiveSettings.load(env={"LIVE_COMPANION_AGENT": "charlotte"}).agent_preset == "charlotte"


def test_load_prefers_default_file_over_env_vars(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    default = tmp_path / "settings.yaml"
    default.write_text("agent_preset: penny\n", encoding="utf-8")
    monkeypatch.setattr(settings_module, "DEFAULT_CONFIG_FILE", default)

    assert LiveSettings.load(env={"LIVE_COMPANION_AGENT": "charlotte"}).agent_preset == "penny"


def test_empty_live_section_uses_defaults(tmp_path: Path):
    path = tmp_path / "settings.yaml"
    path.write_text("live:\n", encoding="utf-8")
    settings = LiveSettings.from_yaml(path)
    assert settings.agent_preset == "paul"
    assert settings.model == DEFAULT_MODEL


def test_non_mapping_live_section_is_rejected(tmp_path: Path):
    path = tmp_path / "settings.yaml"
    path.write_text("live: [paul]\n", encoding="utf-8")
    with pytest.raises(ValueError, match="must be a mapping"):
        LiveSettings.from_yaml(path)
