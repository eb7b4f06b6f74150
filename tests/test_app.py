"""Tests covering the application bootstrap helpers."""

from __future__ import annotations

import asyncio
import io
import json
from pathlib import Path

import pytest

from chromacard import app
from chromacard.domain.session import create_session
from chromacard.services.settings import Settings, SettingsStore


def test_coerce_cli_overrides_casts_types() -> None:
    overrides = app._coerce_cli_overrides(
        [
            "color_source=random",
            "source_latency=0.5",
            "window_width=800",
            "debug_logging=on",
            "presets=cold,warm",
        ]
    )

    assert overrides == {
        "color_source": "random",
        "source_latency": 0.5,
        "window_width": 800,
        "debug_logging": True,
        "presets": ["cold", "warm"],
    }


def test_coerce_cli_overrides_accepts_json_lists() -> None:
    assert app._coerce_cli_overrides(['presets=["warm"]']) == {"presets": ["warm"]}


@pytest.mark.parametrize(
    "entry",
    [
        "colour_source=random",
        "color_source",
        "=random",
        "debug_logging=maybe",
        "color_source=bogus",
        "window_width=wide",
        "presets=[warm",
        'presets=["warm", 1]',
    ],
)
def test_coerce_cli_overrides_rejects_bad_entries(entry: str) -> None:
    with pytest.raises(ValueError):
        app._coerce_cli_overrides([entry])


def test_dump_settings_reports_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CHROMACARD_COLOR_SOURCE", "random")
    store = SettingsStore(tmp_path / "settings.json")
    stream = io.StringIO()

    app._dump_settings(Settings(color_source="random"), store, overrides={"window_width": 10}, stream=stream)

    payload = json.loads(stream.getvalue())
    assert payload["settings"]["color_source"] == "random"
    assert payload["meta"]["path"] == str(tmp_path / "settings.json")
    assert payload["meta"]["cli_overrides"] == ["window_width"]
    assert "CHROMACARD_COLOR_SOURCE" in payload["meta"]["environment_variables"]


def test_main_dump_settings_exits_without_qt(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(app, "configure_logging", lambda debug=False, force=False: None)
    monkeypatch.setattr(app.sys, "argv", ["chromacard"])

    def _fail_qapp() -> None:
        raise AssertionError("Qt must not start when dumping settings")

    monkeypatch.setattr(app, "create_qapp", _fail_qapp)

    app.main(["--settings-path", str(tmp_path / "settings.json"), "--dump-settings", "--set", "window_width=640"])

    payload = json.loads(capsys.readouterr().out)
    assert payload["settings"]["window_width"] == 640


def test_main_rejects_invalid_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(app, "configure_logging", lambda debug=False, force=False: None)
    monkeypatch.setattr(app.sys, "argv", ["chromacard"])

    with pytest.raises(SystemExit) as excinfo:
        app.main(["--set", "nonsense"])

    assert excinfo.value.code == 2


def test_main_rejects_unknown_color_source_before_qt(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(app, "configure_logging", lambda debug=False, force=False: None)
    monkeypatch.setattr(app.sys, "argv", ["chromacard"])

    def _fail_qapp() -> None:
        raise AssertionError("Qt must not start with an invalid color source")

    monkeypatch.setattr(app, "create_qapp", _fail_qapp)

    with pytest.raises(SystemExit) as excinfo:
        app.main(["--set", "color_source=bogus"])

    assert excinfo.value.code == 2


def test_coerce_cli_overrides_normalizes_color_source_case() -> None:
    assert app._coerce_cli_overrides(["color_source=Random"]) == {"color_source": "random"}


def test_build_window_without_qt_returns_headless_card(make_static_source, bootstrap_theme) -> None:
    session = create_session(make_static_source(bootstrap_theme))

    card = app.build_window(session, Settings())

    assert card.widget() is None
    assert card.theme == bootstrap_theme


def test_drain_event_loop_cancels_pending_tasks() -> None:
    loop = asyncio.new_event_loop()
    cancellation_flag = {"called": False}

    async def pending() -> None:
        try:
            await asyncio.sleep(0.1)
        except asyncio.CancelledError:  # pragma: no cover - cancellation path exercised
            cancellation_flag["called"] = True
            raise

    loop.create_task(pending())

    try:
        app._drain_event_loop(loop)
        assert cancellation_flag["called"] is True
    finally:
        loop.close()


def test_drain_event_loop_ignores_closed_loop() -> None:
    loop = asyncio.new_event_loop()
    loop.close()

    app._drain_event_loop(loop)


@pytest.mark.asyncio
async def test_shutdown_controller_cancels_requests(deferred_source, controller, settle_tasks) -> None:
    task = controller.request_random_theme()
    await settle_tasks()

    await app._shutdown_controller(controller)

    assert task.cancelled()


@pytest.mark.asyncio
async def test_shutdown_controller_ignores_missing_controller() -> None:
    await app._shutdown_controller(None)
