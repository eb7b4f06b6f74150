"""Theme module consolidating the color model, presets, and color sources."""

from .models import THEME_FIELDS, ColorTuple, MalformedThemeError, Theme, coerce_theme, normalize_color
from .presets import ThemeRegistry, build_cold_theme, build_warm_theme
from .source import (
    CallableColorSource,
    ColorSource,
    ColorSourceError,
    PresetColorSource,
    RandomColorSource,
    as_color_source,
    build_color_source,
    generate_initial_theme,
)

__all__ = [
    "CallableColorSource",
    "ColorSource",
    "ColorSourceError",
    "ColorTuple",
    "MalformedThemeError",
    "PresetColorSource",
    "RandomColorSource",
    "THEME_FIELDS",
    "Theme",
    "ThemeRegistry",
    "as_color_source",
    "build_cold_theme",
    "build_color_source",
    "build_warm_theme",
    "coerce_theme",
    "generate_initial_theme",
    "normalize_color",
]
