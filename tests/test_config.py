from __future__ import annotations

from pathlib import Path

import pytest

from dolphin_bridge.config import DEFAULT_COMMAND_TEMPLATE, ConfigError, Settings, load_settings


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    for key in ("DOLPHIN_RCON_HOST", "DOLPHIN_RCON_PORT", "DOLPHIN_RCON_PASSWORD", "DOLPHIN_BOT_LABEL"):
        monkeypatch.delenv(key, raising=False)


def test_defaults() -> None:
    settings = Settings()

    assert settings.rcon_host == "localhost"
    assert settings.rcon_port == 25575
    assert settings.rcon_timeout_seconds == 10.0
    assert settings.command_template == DEFAULT_COMMAND_TEMPLATE
    assert settings.event_queue_maxsize == 0
    assert settings.chunk_size == 100
    assert settings.custom_death_keywords == []


def test_environment_overrides(monkeypatch) -> None:
    monkeypatch.setenv("DOLPHIN_RCON_HOST", "mc.example.org")
    monkeypatch.setenv("DOLPHIN_RCON_PASSWORD", "hunter2")
    monkeypatch.setenv("DOLPHIN_CUSTOM_DEATH_KEYWORDS", '["vaporized"]')

    settings = load_settings()

    assert settings.rcon_host == "mc.example.org"
    assert settings.rcon_password.get_secret_value() == "hunter2"
    assert settings.custom_death_keywords == ["vaporized"]
    assert "hunter2" not in str(settings.model_dump(mode="json"))


def test_toml_file_overrides_environment(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("DOLPHIN_BOT_LABEL", "FromEnv")
    config_file = tmp_path / "dolphin.toml"
    config_file.write_text(
        'bot_label = "FromFile"\nrcon_port = 25576\ncustom_death_keywords = ["vaporized"]\n',
        encoding="utf-8",
    )

    settings = load_settings(config_file)

    assert settings.bot_label == "FromFile"
    assert settings.rcon_port == 25576
    assert settings.custom_death_keywords == ["vaporized"]


def test_missing_config_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_settings(tmp_path / "missing.toml")


def test_invalid_toml(tmp_path: Path) -> None:
    config_file = tmp_path / "broken.toml"
    config_file.write_text("bot_label = ", encoding="utf-8")

    with pytest.raises(ConfigError, match="Invalid TOML"):
        load_settings(config_file)
