"""Color sources that produce new themes on demand."""

from __future__ import annotations

import asyncio
import inspect
import logging
import random
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Iterable, Protocol, runtime_checkable

from .models import MalformedThemeError, Theme, coerce_theme
from .presets import ThemeRegistry

if TYPE_CHECKING:  # pragma: no cover - imports for type checking only
    from ..services.settings import Settings

LOGGER = logging.getLogger(__name__)

COLOR_SOURCE_CHOICES: tuple[str, ...] = ("presets", "random")


class ColorSourceError(RuntimeError):
    """Raised when a color source fails to produce a theme."""


@runtime_checkable
class ColorSource(Protocol):
    """Anything that can produce a fresh :class:`Theme`, synchronously or not."""

    def generate_theme(self) -> Theme:
        ...

    async def generate_theme_async(self) -> Theme:
        ...


class PresetColorSource:
    """Picks one of the registry's presets at random."""

    def __init__(
        self,
        registry: ThemeRegistry | None = None,
        *,
        names: Iterable[str] | None = None,
        latency: float = 0.0,
        rng: random.Random | None = None,
    ) -> None:
        self._registry = registry or ThemeRegistry()
        self._themes = self._registry.themes(names)
        if not self._themes:
            LOGGER.warning("No configured presets matched %s; using all registered presets.", names)
            self._themes = self._registry.themes()
        self._latency = max(0.0, float(latency))
        self._rng = rng or random.Random()

    @property
    def themes(self) -> list[Theme]:
        return list(self._themes)

    def generate_theme(self) -> Theme:
        return self._rng.choice(self._themes)

    async def generate_theme_async(self) -> Theme:
        if self._latency:
            await asyncio.sleep(self._latency)
        return self.generate_theme()


class RandomColorSource:
    """Generates three independent random ``#rrggbb`` colors."""

    def __init__(self, *, latency: float = 0.0, rng: random.Random | None = None) -> None:
        self._latency = max(0.0, float(latency))
        self._rng = rng or random.Random()

    def generate_theme(self) -> Theme:
        background, foreground, primary = (f"#{self._rng.randrange(0x1000000):06x}" for _ in range(3))
        return Theme(background=background, foreground=foreground, primary=primary)

    async def generate_theme_async(self) -> Theme:
        if self._latency:
            await asyncio.sleep(self._latency)
        return self.generate_theme()


class CallableColorSource:
    """Adapts plain functions to the :class:`ColorSource` protocol.

    ``generate`` is called for synchronous requests. Asynchronous requests use
    ``generate_async`` when provided; otherwise ``generate`` runs in the
    loop's default executor so a slow function never blocks the event loop.
    """

    def __init__(
        self,
        generate: Callable[[], Any],
        generate_async: Callable[[], Awaitable[Any]] | None = None,
    ) -> None:
        self._generate = generate
        self._generate_async = generate_async

    def generate_theme(self) -> Theme:
        return coerce_theme(self._generate())

    async def generate_theme_async(self) -> Theme:
        if self._generate_async is not None:
            return coerce_theme(await self._generate_async())
        loop = asyncio.get_running_loop()
        return coerce_theme(await loop.run_in_executor(None, self._generate))


def as_color_source(candidate: Any) -> ColorSource:
    """Return ``candidate`` as a :class:`ColorSource`, wrapping bare callables."""

    if isinstance(candidate, ColorSource):
        return candidate
    if inspect.iscoroutinefunction(candidate):
        raise TypeError("Async-only color functions need a synchronous counterpart for bootstrap")
    if callable(candidate):
        return CallableColorSource(candidate)
    raise TypeError(f"Cannot use {type(candidate).__name__} as a color source")


def build_color_source(settings: "Settings", *, rng: random.Random | None = None) -> ColorSource:
    """Construct the color source selected by ``settings.color_source``."""

    kind = (settings.color_source or "presets").strip().lower()
    if kind == "presets":
        return PresetColorSource(names=settings.presets or None, latency=settings.source_latency, rng=rng)
    if kind == "random":
        return RandomColorSource(latency=settings.source_latency, rng=rng)
    raise ValueError(f"Unknown color source '{settings.color_source}' (choose from {', '.join(COLOR_SOURCE_CHOICES)})")


def generate_initial_theme(source: ColorSource) -> Theme:
    """Call ``source`` synchronously once, wrapping any failure in :class:`ColorSourceError`."""

    try:
        return coerce_theme(source.generate_theme())
    except ColorSourceError:
        raise
    except MalformedThemeError as exc:
        raise ColorSourceError(f"Color source returned a malformed theme: {exc}") from exc
    except Exception as exc:
        raise ColorSourceError(f"Color source failed: {exc}") from exc


__all__ = [
    "COLOR_SOURCE_CHOICES",
    "CallableColorSource",
    "ColorSource",
    "ColorSourceError",
    "PresetColorSource",
    "RandomColorSource",
    "as_color_source",
    "build_color_source",
    "generate_initial_theme",
]
