"""Domain layer for the theme synchronization core.

Domain Managers:
    - ThemeStore: Theme and request lifecycle state with subscriptions
    - ThemeController: Set/request operations backed by a color source

Neither manager depends on Qt or UI widgets.
"""

from __future__ import annotations

from .actions import Action, RandomThemeFulfilled, RandomThemeRejected, RandomThemeRequested, ThemeChanged
from .session import ThemeSession, create_session
from .state import RequestState, RequestStatus, ThemeState
from .theme_controller import ThemeController
from .theme_store import ThemeStore, reduce_theme_state

__all__: list[str] = [
    "Action",
    "RandomThemeFulfilled",
    "RandomThemeRejected",
    "RandomThemeRequested",
    "RequestState",
    "RequestStatus",
    "ThemeChanged",
    "ThemeController",
    "ThemeSession",
    "ThemeState",
    "ThemeStore",
    "create_session",
    "reduce_theme_state",
]
