"""Presentation widgets."""

from .theme_card import ThemeCard

__all__ = ["ThemeCard"]
