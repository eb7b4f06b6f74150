"""Session bootstrap wiring the theme store to its controller."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..services.settings import Settings
from ..theme.source import ColorSource, ColorSourceError, as_color_source, build_color_source, generate_initial_theme
from .theme_controller import LoopResolver, ThemeController
from .theme_store import ThemeStore

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class ThemeSession:
    """Container returned by :func:`create_session`."""

    store: ThemeStore
    controller: ThemeController
    source: ColorSource


def create_session(
    source: ColorSource | Any | None = None,
    *,
    settings: Settings | None = None,
    loop_resolver: LoopResolver | None = None,
) -> ThemeSession:
    """Build a store seeded from one synchronous call to the color source.

    Raises:
        ColorSourceError: If the initial theme cannot be generated.
    """

    if source is not None:
        color_source = as_color_source(source)
    else:
        try:
            color_source = build_color_source(settings or Settings())
        except ValueError as exc:
            raise ColorSourceError(str(exc)) from exc
    initial = generate_initial_theme(color_source)
    store = ThemeStore(initial)
    controller = ThemeController(store, color_source, loop_resolver=loop_resolver)
    controller.record_initial_theme(initial)
    LOGGER.info("Theme session started with %s", initial.to_dict())
    return ThemeSession(store=store, controller=controller, source=color_source)


__all__ = ["ThemeSession", "create_session"]
