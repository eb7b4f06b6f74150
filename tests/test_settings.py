"""Tests for settings loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from chromacard.services.settings import Settings, SettingsStore


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "CHROMACARD_COLOR_SOURCE",
        "CHROMACARD_DEBUG_LOGGING",
        "CHROMACARD_SOURCE_LATENCY",
        "CHROMACARD_WINDOW_WIDTH",
        "CHROMACARD_WINDOW_HEIGHT",
        "CHROMACARD_PRESETS",
    ):
        monkeypatch.delenv(name, raising=False)


def test_load_returns_defaults_when_file_missing(tmp_path: Path) -> None:
    store = SettingsStore(tmp_path / "settings.json")

    assert store.load() == Settings()


def test_load_reads_known_fields_and_ignores_unknown(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"color_source": "random", "window_width": 640, "theme": "dark"}), encoding="utf-8")

    settings = SettingsStore(path).load()

    assert settings.color_source == "random"
    assert settings.window_width == 640
    assert settings.presets == ["warm", "cold"]


def test_load_ignores_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")

    assert SettingsStore(path).load() == Settings()


def test_load_ignores_non_object_payload(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text("[1, 2]", encoding="utf-8")

    assert SettingsStore(path).load() == Settings()


def test_cli_overrides_apply_before_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CHROMACARD_COLOR_SOURCE", "presets")
    store = SettingsStore(tmp_path / "settings.json")

    settings = store.load(overrides={"color_source": "random", "source_latency": 0.5, "unknown": 1})

    assert settings.color_source == "presets"
    assert settings.source_latency == 0.5


def test_environment_overrides_are_typed(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CHROMACARD_DEBUG_LOGGING", "yes")
    monkeypatch.setenv("CHROMACARD_SOURCE_LATENCY", "0.25")
    monkeypatch.setenv("CHROMACARD_WINDOW_HEIGHT", "200")
    monkeypatch.setenv("CHROMACARD_PRESETS", "cold, warm")

    settings = SettingsStore(tmp_path / "settings.json").load()

    assert settings.debug_logging is True
    assert settings.source_latency == 0.25
    assert settings.window_height == 200
    assert settings.presets == ["cold", "warm"]


def test_invalid_numeric_environment_override_is_ignored(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("CHROMACARD_WINDOW_WIDTH", "wide")

    settings = SettingsStore(tmp_path / "settings.json").load()

    assert settings.window_width == Settings().window_width


def test_unknown_environment_color_source_falls_back_to_default(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.setenv("CHROMACARD_COLOR_SOURCE", "bogus")

    with caplog.at_level("WARNING", logger="chromacard.services.settings"):
        settings = SettingsStore(tmp_path / "settings.json").load()

    assert settings.color_source == Settings().color_source
    assert "bogus" in caplog.text


def test_unknown_file_color_source_falls_back_to_default(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"color_source": "rainbow", "window_width": 640}), encoding="utf-8")

    settings = SettingsStore(path).load()

    assert settings.color_source == "presets"
    assert settings.window_width == 640


def test_color_source_is_case_normalized(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CHROMACARD_COLOR_SOURCE", " Random ")

    assert SettingsStore(tmp_path / "settings.json").load().color_source == "random"
