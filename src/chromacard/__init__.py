"""ChromaCard: a themed card whose colors are swapped by an async color source."""

from .domain import ThemeController, ThemeSession, ThemeStore, create_session
from .theme import ColorSourceError, MalformedThemeError, Theme

__version__ = "0.1.0"

__all__ = [
    "ColorSourceError",
    "MalformedThemeError",
    "Theme",
    "ThemeController",
    "ThemeSession",
    "ThemeStore",
    "__version__",
    "create_session",
]
