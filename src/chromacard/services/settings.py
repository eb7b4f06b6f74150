"""Settings dataclass and loading helpers."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping

from ..theme.source import COLOR_SOURCE_CHOICES

__all__ = ["Settings", "SettingsStore", "DEFAULT_SETTINGS_PATH"]

LOGGER = logging.getLogger(__name__)
_SETTINGS_DIR = Path.home() / ".chromacard"
DEFAULT_SETTINGS_PATH = _SETTINGS_DIR / "settings.json"
_ENV_OVERRIDES: Mapping[str, str] = {
    "CHROMACARD_COLOR_SOURCE": "color_source",
}
_BOOL_ENV_OVERRIDES: Mapping[str, str] = {
    "CHROMACARD_DEBUG_LOGGING": "debug_logging",
}
_FLOAT_ENV_OVERRIDES: Mapping[str, str] = {
    "CHROMACARD_SOURCE_LATENCY": "source_latency",
}
_INT_ENV_OVERRIDES: Mapping[str, str] = {
    "CHROMACARD_WINDOW_WIDTH": "window_width",
    "CHROMACARD_WINDOW_HEIGHT": "window_height",
}
_LIST_ENV_OVERRIDES: Mapping[str, str] = {
    "CHROMACARD_PRESETS": "presets",
}
_TRUE_VALUES = {"1", "true", "yes", "on", "debug"}


@dataclass(slots=True)
class Settings:
    """User-configurable application settings."""

    color_source: str = "presets"
    presets: list[str] = field(default_factory=lambda: ["warm", "cold"])
    source_latency: float = 0.0
    window_width: int = 480
    window_height: int = 320
    debug_logging: bool = False


class SettingsStore:
    """Read-only loader for :class:`Settings`.

    Precedence (lowest first): defaults, the JSON settings file, runtime
    overrides (``--set`` on the command line), then ``CHROMACARD_*``
    environment variables.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or DEFAULT_SETTINGS_PATH

    @property
    def path(self) -> Path:
        """Return the resolved path backing this store."""

        return self._path

    def load(self, *, overrides: Mapping[str, Any] | None = None) -> Settings:
        """Load settings from disk, applying CLI/environment overrides when present."""

        payload = self._read_payload()
        settings = Settings()
        if payload:
            data = _filter_fields(payload)
            try:
                settings = Settings(**data)
            except TypeError as exc:
                LOGGER.warning("Settings payload contained unexpected data: %s", exc)
                settings = Settings()
            LOGGER.debug("Settings loaded from %s: %s", self._path, sorted(data))

        if overrides:
            settings = self._apply_overrides(settings, overrides, source="CLI")

        return _validate_color_source(self._apply_env_overrides(settings))

    def _read_payload(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError as exc:
            LOGGER.warning("Settings file %s is not valid JSON: %s", self._path, exc)
            return {}
        if not isinstance(payload, dict):
            LOGGER.warning("Settings file %s must contain a JSON object", self._path)
            return {}
        return payload

    def _apply_overrides(
        self,
        settings: Settings,
        overrides: Mapping[str, Any],
        *,
        source: str = "runtime",
    ) -> Settings:
        allowed = {item.name for item in fields(Settings)}
        filtered: Dict[str, Any] = {}
        for key, value in overrides.items():
            if key not in allowed or value is None:
                continue
            filtered[key] = value
        if filtered:
            LOGGER.debug("Applying %s settings overrides: %s", source, sorted(filtered))
            settings = replace(settings, **filtered)
        return settings

    def _apply_env_overrides(self, settings: Settings) -> Settings:
        overrides: Dict[str, Any] = {}
        for env_name, field_name in _ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is not None:
                overrides[field_name] = value
        for env_name, field_name in _BOOL_ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is not None:
                overrides[field_name] = value.strip().lower() in _TRUE_VALUES
        for env_name, field_name in _LIST_ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is not None:
                overrides[field_name] = [item.strip() for item in value.split(",") if item.strip()]
        for env_name, field_name in _INT_ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is None:
                continue
            try:
                overrides[field_name] = int(value, 10)
            except ValueError:
                LOGGER.warning("Environment override %s=%s is not a valid integer", env_name, value)
        for env_name, field_name in _FLOAT_ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is None:
                continue
            try:
                overrides[field_name] = float(value)
            except ValueError:
                LOGGER.warning("Environment override %s=%s is not a valid float", env_name, value)
        if overrides:
            settings = self._apply_overrides(settings, overrides, source="environment")
        return settings


def _filter_fields(payload: Mapping[str, Any]) -> Dict[str, Any]:
    allowed = {item.name for item in fields(Settings)}
    return {key: value for key, value in payload.items() if key in allowed}


def _validate_color_source(settings: Settings) -> Settings:
    kind = str(settings.color_source).strip().lower()
    if kind in COLOR_SOURCE_CHOICES:
        return settings if kind == settings.color_source else replace(settings, color_source=kind)
    fallback = Settings().color_source
    LOGGER.warning(
        "Unknown color source %r (choose from %s); using %r",
        settings.color_source,
        ", ".join(COLOR_SOURCE_CHOICES),
        fallback,
    )
    return replace(settings, color_source=fallback)
