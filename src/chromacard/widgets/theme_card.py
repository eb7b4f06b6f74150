"""Themed card with a "Change Theme" button, with optional Qt widgets."""

from __future__ import annotations

import logging
from typing import Any

from ..domain.state import RequestState, RequestStatus
from ..domain.theme_controller import ThemeController
from ..domain.theme_store import ThemeStore
from ..theme.models import Theme

try:  # pragma: no cover - Qt imports are optional during tests
    from PySide6.QtCore import Qt
    from PySide6.QtWidgets import QApplication, QFrame, QLabel, QPushButton, QVBoxLayout
except ImportError:  # pragma: no cover - PySide6 not available
    Qt = None  # type: ignore[assignment]
    QApplication = None  # type: ignore[assignment]
    QFrame = None  # type: ignore[assignment]
    QLabel = None  # type: ignore[assignment]
    QPushButton = None  # type: ignore[assignment]
    QVBoxLayout = None  # type: ignore[assignment]

LOGGER = logging.getLogger(__name__)

BUTTON_TEXT = "Change Theme"
CARD_OBJECT_NAME = "chromacard-card"
BUTTON_OBJECT_NAME = "chromacard-change-theme"


def card_stylesheet(theme: Theme) -> str:
    return f"QFrame#{CARD_OBJECT_NAME} {{ background-color: {theme.background}; }}"


def button_stylesheet(theme: Theme) -> str:
    return (
        f"QPushButton#{BUTTON_OBJECT_NAME} {{"
        f" background-color: {theme.foreground};"
        f" color: {theme.primary};"
        f" border: 2px solid {theme.foreground};"
        " font-size: 32px;"
        " padding: 10px;"
        " }"
    )


def status_text(request: RequestState) -> str:
    """Describe the request lifecycle for the card's status line."""

    if request.status is RequestStatus.PENDING:
        return "Generating a new theme..."
    if request.status is RequestStatus.REJECTED:
        return f"Theme request failed: {request.error}" if request.error else "Theme request failed"
    return ""


class ThemeCard:
    """Presentation layer for the theme store.

    The card subscribes to the store, mirrors the latest theme and request
    status, and re-renders its Qt widgets (when a ``QApplication`` exists)
    on every notification. Without Qt it still tracks state for tests.
    """

    def __init__(self, store: ThemeStore, controller: ThemeController, *, parent: Any | None = None) -> None:
        self._store = store
        self._controller = controller
        self.theme: Theme = store.get_state()
        self.status_text: str = status_text(store.request_state)
        self.render_count = 0

        self._frame: Any = None
        self._button: Any = None
        self._status_label: Any = None
        self._build_qt_widgets(parent)
        self._render()
        self._unsubscribe = store.subscribe(self._on_theme_changed)

    def widget(self) -> Any | None:
        """Return the underlying :class:`QFrame` when available."""

        return self._frame

    def request_change(self) -> None:
        """Ask the controller for a new random theme (the button's click handler)."""

        self._controller.request_random_theme()

    def close(self) -> None:
        self._unsubscribe()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _on_theme_changed(self, theme: Theme) -> None:
        self.theme = theme
        self.status_text = status_text(self._store.request_state)
        self._render()

    def _render(self) -> None:
        self.render_count += 1
        if self._frame is None:
            return
        self._frame.setStyleSheet(card_stylesheet(self.theme))
        self._button.setStyleSheet(button_stylesheet(self.theme))
        self._status_label.setText(self.status_text)
        self._status_label.setStyleSheet(f"color: {self.theme.primary};")
        self._status_label.setVisible(bool(self.status_text))

    def _build_qt_widgets(self, parent: Any | None) -> None:
        if QFrame is None or QApplication is None or QApplication.instance() is None:
            return

        frame = QFrame(parent)
        frame.setObjectName(CARD_OBJECT_NAME)
        layout = QVBoxLayout(frame)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)

        button = QPushButton(BUTTON_TEXT, frame)
        button.setObjectName(BUTTON_OBJECT_NAME)
        button.clicked.connect(self.request_change)
        layout.addWidget(button, alignment=Qt.AlignmentFlag.AlignCenter)

        label = QLabel("", frame)
        label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(label, alignment=Qt.AlignmentFlag.AlignCenter)

        self._frame = frame
        self._button = button
        self._status_label = label
        LOGGER.debug("Theme card widgets created")


__all__ = [
    "BUTTON_TEXT",
    "ThemeCard",
    "button_stylesheet",
    "card_stylesheet",
    "status_text",
]
