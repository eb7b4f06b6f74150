"""Named theme presets and the registry that resolves them."""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping

from .models import Theme


def build_warm_theme() -> Theme:
    return Theme(background="#B270A2", foreground="#FF8FB1", primary="#FCE2DB")


def build_cold_theme() -> Theme:
    return Theme(background="#AFB4FF", foreground="#9C9EFE", primary="#A66CFF")


class ThemeRegistry:
    """Ordered registry of named themes.

    Unknown names resolve to the default preset rather than failing, so a
    stale preset name in the settings file still yields a usable theme.
    """

    def __init__(self, themes: Mapping[str, Theme] | None = None, *, default_name: str | None = None) -> None:
        self._themes: Dict[str, Theme] = {}
        for name, theme in (themes or {}).items():
            self.register(name, theme)
        if not self._themes:
            self.register("warm", build_warm_theme())
            self.register("cold", build_cold_theme())
        key = (default_name or "").strip().lower()
        self._default_name = key if key in self._themes else next(iter(self._themes))

    def register(self, name: str, theme: Theme, *, overwrite: bool = True) -> None:
        key = name.strip().lower()
        if not key:
            raise ValueError("Preset names cannot be empty")
        if not overwrite and key in self._themes:
            raise ValueError(f"Preset '{name}' already registered")
        self._themes[key] = theme

    def names(self) -> List[str]:
        return list(self._themes)

    def themes(self, names: Iterable[str] | None = None) -> List[Theme]:
        """Return the registered themes, optionally limited to ``names``."""

        if names is None:
            return list(self._themes.values())
        selected = [self._themes[key] for key in (n.strip().lower() for n in names) if key in self._themes]
        return selected

    def resolve(self, name: str | None = None) -> Theme:
        key = (name or self._default_name).strip().lower()
        return self._themes.get(key) or self._themes[self._default_name]

    def default(self) -> Theme:
        return self._themes[self._default_name]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.strip().lower() in self._themes

    def __len__(self) -> int:
        return len(self._themes)


__all__ = ["ThemeRegistry", "build_cold_theme", "build_warm_theme"]
