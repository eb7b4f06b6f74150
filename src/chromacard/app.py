"""Application bootstrap helpers for the ChromaCard desktop app."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import json
import logging
import os
import sys
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, TextIO, cast

from .domain.session import ThemeSession, create_session
from .domain.theme_controller import ThemeController
from .services.settings import Settings, SettingsStore
from .theme.source import COLOR_SOURCE_CHOICES
from .utils import logging as logging_utils
from .widgets.theme_card import ThemeCard

_TRUE_VALUES = {"1", "true", "yes", "on", "debug"}
_FALSE_VALUES = {"0", "false", "no", "off", "disabled"}
_LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class QtRuntime:
    """Container returned by :func:`create_qapp`."""

    app: Any
    loop: asyncio.AbstractEventLoop


def configure_logging(debug: bool = False, *, force: bool = False) -> None:
    """Configure logging for the application."""

    level = logging.DEBUG if debug else logging.INFO
    logging_utils.setup_logging(level, force=force)
    _LOGGER.debug("Logging configured (level=%s)", logging.getLevelName(level))
    logging_utils.install_qt_message_handler()


def load_settings(
    path: Optional[Path] = None,
    *,
    store: SettingsStore | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> Settings:
    """Load settings or fall back to defaults."""

    active_store = store or SettingsStore(path)
    try:
        return active_store.load(overrides=overrides)
    except Exception as exc:  # pragma: no cover - defensive path
        _LOGGER.warning("Failed to load settings from %s: %s", active_store.path, exc)
        return Settings()


def create_qapp() -> QtRuntime:
    """Create a qasync-powered QApplication instance."""

    try:  # Local import to avoid mandatory PySide6 dependency at import time.
        from PySide6.QtWidgets import QApplication
    except ImportError as exc:  # pragma: no cover - depends on desktop stack
        raise RuntimeError("PySide6 must be installed to launch the ChromaCard UI.") from exc

    try:
        from qasync import QEventLoop
    except ImportError as exc:  # pragma: no cover - depends on env setup
        raise RuntimeError("qasync is required to run the async Qt event loop.") from exc

    app = cast(Any, QApplication.instance() or QApplication(sys.argv))
    app.setApplicationName("ChromaCard")
    app.setApplicationDisplayName("ChromaCard")

    loop = QEventLoop(app)
    asyncio.set_event_loop(loop)
    try:
        app.aboutToQuit.connect(loop.stop)  # type: ignore[attr-defined]
    except AttributeError:  # pragma: no cover - in case of mock QApplication
        pass
    return QtRuntime(app=app, loop=loop)


def build_window(session: ThemeSession, settings: Settings) -> ThemeCard:
    """Create the theme card and size its top-level widget from ``settings``."""

    card = ThemeCard(session.store, session.controller)
    frame = card.widget()
    if frame is not None:
        frame.setWindowTitle("ChromaCard")
        frame.resize(max(200, settings.window_width), max(120, settings.window_height))
    return card


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point invoked by the `chromacard` console script."""

    args, passthrough = _parse_cli_args(argv)
    _rewrite_sys_argv(passthrough)

    debug = _env_flag("CHROMACARD_DEBUG", default=False)
    configure_logging(debug)

    settings_path = args.settings_path or os.environ.get("CHROMACARD_SETTINGS_PATH")
    resolved_path = Path(settings_path).expanduser() if settings_path else None
    settings_store = SettingsStore(resolved_path)
    try:
        cli_overrides = _coerce_cli_overrides(args.overrides or [])
    except ValueError as exc:
        print(f"Invalid --set override: {exc}", file=sys.stderr)
        raise SystemExit(2) from exc

    settings = load_settings(resolved_path, store=settings_store, overrides=cli_overrides or None)

    if args.dump_settings:
        _dump_settings(settings, settings_store, overrides=cli_overrides)
        return

    if settings.debug_logging and not debug:
        configure_logging(True, force=True)

    runtime = create_qapp()
    loop = runtime.loop
    session = create_session(settings=settings, loop_resolver=lambda: loop)
    card = build_window(session, settings)
    frame = card.widget()
    if frame is not None:
        frame.show()

    try:
        loop.run_forever()
    except KeyboardInterrupt:  # pragma: no cover - manual shutdown path
        _LOGGER.info("Shutdown requested by user.")
    finally:
        card.close()
        with contextlib.suppress(RuntimeError):
            loop.run_until_complete(_shutdown_controller(session.controller))
        _drain_event_loop(loop)
        loop.close()


def _env_flag(name: str, *, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


def _drain_event_loop(loop: asyncio.AbstractEventLoop) -> None:
    """Cancel tasks left on ``loop`` and finalize async generators before it closes."""

    if loop.is_closed():
        return

    async def _cancel_leftovers() -> None:
        current = asyncio.current_task()
        leftovers = [task for task in asyncio.all_tasks() if task is not current]
        if leftovers:
            _LOGGER.debug("Cancelling %s leftover task(s) before shutdown.", len(leftovers))
        for task in leftovers:
            task.cancel()
        await asyncio.gather(*leftovers, return_exceptions=True)
        await loop.shutdown_asyncgens()

    try:
        loop.run_until_complete(_cancel_leftovers())
    except RuntimeError as exc:  # pragma: no cover - loop already stopping
        _LOGGER.debug("Unable to drain asyncio loop: %s", exc)


async def _shutdown_controller(controller: ThemeController | None) -> None:
    """Cancel theme requests that are still waiting on the color source."""

    if controller is None:
        return
    try:
        await controller.aclose()
    except Exception as exc:  # pragma: no cover - defensive logging
        _LOGGER.debug("Theme controller shutdown failed: %s", exc)


def _parse_cli_args(argv: Sequence[str] | None) -> tuple[argparse.Namespace, list[str]]:
    parser = argparse.ArgumentParser(
        prog="chromacard",
        add_help=True,
        description="Launch the ChromaCard theme demo or inspect its configuration.",
    )
    parser.add_argument(
        "--dump-settings",
        action="store_true",
        help="Print the effective settings payload and exit.",
    )
    parser.add_argument(
        "--settings-path",
        metavar="PATH",
        help="Override the default ~/.chromacard/settings.json path.",
    )
    parser.add_argument(
        "--set",
        dest="overrides",
        metavar="KEY=VALUE",
        action="append",
        default=[],
        help="Override settings before launch (repeatable).",
    )
    return parser.parse_known_args(argv)


def _rewrite_sys_argv(passthrough: Sequence[str]) -> None:
    program = sys.argv[0] if sys.argv else "chromacard"
    sys.argv = [program, *passthrough]


def _coerce_cli_overrides(items: Sequence[str]) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for entry in items:
        key, sep, raw_value = entry.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ValueError(f"Override '{entry}' must use KEY=VALUE syntax.")
        parser = _OVERRIDE_PARSERS.get(key)
        if parser is None:
            raise ValueError(f"Unknown setting '{key}'.")
        overrides[key] = parser(raw_value.strip())
    return overrides


def _parse_color_source(value: str) -> str:
    kind = value.lower()
    if kind not in COLOR_SOURCE_CHOICES:
        raise ValueError(f"color_source must be one of {', '.join(COLOR_SOURCE_CHOICES)}, not '{value}'.")
    return kind


def _parse_presets(value: str) -> list[str]:
    if not value.startswith("["):
        return [item.strip() for item in value.split(",") if item.strip()]
    try:
        names = json.loads(value)
    except json.JSONDecodeError as exc:
        raise ValueError("presets must be a JSON array or a comma-separated list.") from exc
    if not isinstance(names, list) or not all(isinstance(name, str) for name in names):
        raise ValueError("presets must list preset names.")
    return names


def _parse_bool(value: str) -> bool:
    lowered = value.lower()
    if lowered in _TRUE_VALUES or lowered in _FALSE_VALUES:
        return lowered in _TRUE_VALUES
    raise ValueError(f"Cannot read '{value}' as on/off.")


_OVERRIDE_PARSERS: Dict[str, Callable[[str], Any]] = {
    "color_source": _parse_color_source,
    "presets": _parse_presets,
    "source_latency": float,
    "window_width": int,
    "window_height": int,
    "debug_logging": _parse_bool,
}


def _dump_settings(
    settings: Settings,
    store: SettingsStore,
    *,
    overrides: Mapping[str, Any],
    stream: TextIO | None = None,
) -> None:
    destination = stream or sys.stdout
    metadata = {
        "path": str(store.path),
        "cli_overrides": sorted(overrides.keys()),
        "environment_variables": _active_env_overrides(),
    }
    json.dump({"settings": asdict(settings), "meta": metadata}, destination, indent=2)
    destination.write("\n")


def _active_env_overrides() -> list[str]:
    return sorted(name for name in os.environ if name.startswith("CHROMACARD_"))
