"""Actions accepted by :meth:`ThemeStore.dispatch`."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Action:
    """Base class for all theme store actions."""


@dataclass(frozen=True, slots=True)
class ThemeChanged(Action):
    """Replace the whole theme with ``theme``.

    Attributes:
        theme: A :class:`~chromacard.theme.Theme` or a mapping with exactly
            the three color fields. Mappings are validated on dispatch.
    """

    theme: Any


@dataclass(frozen=True, slots=True)
class RandomThemeRequested(Action):
    """A random theme fetch with sequence number ``request_id`` was issued."""

    request_id: int


@dataclass(frozen=True, slots=True)
class RandomThemeFulfilled(Action):
    """The fetch ``request_id`` resolved with ``theme``."""

    request_id: int
    theme: Any


@dataclass(frozen=True, slots=True)
class RandomThemeRejected(Action):
    """The fetch ``request_id`` failed with ``error``."""

    request_id: int
    error: BaseException


__all__ = [
    "Action",
    "RandomThemeFulfilled",
    "RandomThemeRejected",
    "RandomThemeRequested",
    "ThemeChanged",
]
