"""Theme store: the single source of truth for the applied theme.

The store owns a :class:`ThemeState` snapshot, applies actions through a pure
reducer, and notifies subscribers synchronously after every dispatch that
changes observable state.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import replace
from typing import Any, Callable, Deque

from ..theme.models import Theme, coerce_theme
from .actions import (
    Action,
    RandomThemeFulfilled,
    RandomThemeRejected,
    RandomThemeRequested,
    ThemeChanged,
)
from .state import RequestState, ThemeState

LOGGER = logging.getLogger(__name__)

Listener = Callable[[Theme], None]
Unsubscribe = Callable[[], None]


def reduce_theme_state(state: ThemeState, action: Action) -> ThemeState:
    """Return the state that results from applying ``action`` to ``state``.

    Returns ``state`` itself when the action has no observable effect, which
    includes resolutions that belong to a superseded request.
    """

    if isinstance(action, ThemeChanged):
        if action.theme == state.theme:
            return state
        return replace(state, theme=action.theme)

    if isinstance(action, RandomThemeRequested):
        if action.request_id <= state.request.request_id:
            return state
        return replace(state, request=RequestState.pending(action.request_id))

    if isinstance(action, (RandomThemeFulfilled, RandomThemeRejected)):
        current = state.request
        if not current.is_pending or action.request_id != current.request_id:
            return state
        if isinstance(action, RandomThemeFulfilled):
            return ThemeState(theme=action.theme, request=RequestState.fulfilled(action.request_id))
        return replace(state, request=RequestState.rejected(action.request_id, action.error))

    raise TypeError(f"Unsupported theme store action: {type(action).__name__}")


class _Subscription:
    __slots__ = ("listener", "active")

    def __init__(self, listener: Listener) -> None:
        self.listener = listener
        self.active = True


class ThemeStore:
    """Owns the theme and request lifecycle, and notifies subscribers of changes.

    Dispatch is a critical section: an action dispatched from inside a
    listener is validated immediately but applied only after the current
    notification round has finished, so every listener observes the same
    snapshot.

    Thread Safety:
        Not thread-safe. All dispatches happen on the event loop thread.
    """

    __slots__ = ("_state", "_subscriptions", "_queue", "_dispatching")

    def __init__(self, initial_theme: Theme | Any) -> None:
        self._state = ThemeState(theme=coerce_theme(initial_theme))
        self._subscriptions: list[_Subscription] = []
        self._queue: Deque[Action] = deque()
        self._dispatching = False

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------
    def get_state(self) -> Theme:
        """Return the currently applied theme."""
        return self._state.theme

    @property
    def request_state(self) -> RequestState:
        """Return the lifecycle of the latest random theme request."""
        return self._state.request

    def snapshot(self) -> ThemeState:
        """Return the full store snapshot (theme plus request state)."""
        return self._state

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def dispatch(self, action: Action) -> None:
        """Apply ``action`` and notify subscribers if the state changed.

        Raises:
            MalformedThemeError: If a theme-carrying action holds a partial theme.
            TypeError: If ``action`` is not a theme store action.
        """
        validated = _validate_action(action)
        self._queue.append(validated)
        if self._dispatching:
            LOGGER.debug("Deferring %s dispatched during notification", type(validated).__name__)
            return

        self._dispatching = True
        try:
            while self._queue:
                self._apply(self._queue.popleft())
        finally:
            self._queue.clear()
            self._dispatching = False

    def _apply(self, action: Action) -> None:
        previous = self._state
        updated = reduce_theme_state(previous, action)
        if updated is previous:
            LOGGER.debug("%s left theme state unchanged", type(action).__name__)
            return
        self._state = updated
        LOGGER.debug(
            "%s applied (request=%s #%d)",
            type(action).__name__,
            updated.request.status.value,
            updated.request.request_id,
        )
        self._notify(updated.theme)

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------
    def subscribe(self, listener: Listener) -> Unsubscribe:
        """Register ``listener`` and return a handle that removes it again.

        Listeners are called in registration order with the current theme.
        Calling the returned handle more than once is harmless.
        """
        subscription = _Subscription(listener)
        self._subscriptions.append(subscription)
        LOGGER.debug("Subscribed theme listener %s", _listener_name(listener))

        def unsubscribe() -> None:
            if not subscription.active:
                return
            subscription.active = False
            self._subscriptions.remove(subscription)
            LOGGER.debug("Unsubscribed theme listener %s", _listener_name(listener))

        return unsubscribe

    def listener_count(self) -> int:
        return len(self._subscriptions)

    def _notify(self, theme: Theme) -> None:
        for subscription in tuple(self._subscriptions):
            if not subscription.active:
                continue
            try:
                subscription.listener(theme)
            except Exception:
                LOGGER.exception("Theme listener %s raised during notification", _listener_name(subscription.listener))


def _validate_action(action: Action) -> Action:
    if isinstance(action, ThemeChanged):
        theme = coerce_theme(action.theme)
        return action if theme is action.theme else ThemeChanged(theme)
    if isinstance(action, RandomThemeFulfilled):
        theme = coerce_theme(action.theme)
        return action if theme is action.theme else RandomThemeFulfilled(action.request_id, theme)
    if isinstance(action, (RandomThemeRequested, RandomThemeRejected)):
        return action
    raise TypeError(f"Unsupported theme store action: {type(action).__name__}")


def _listener_name(listener: Listener) -> str:
    if hasattr(listener, "__self__") and hasattr(listener, "__func__"):
        return f"{type(listener.__self__).__name__}.{listener.__func__.__name__}"
    if hasattr(listener, "__name__"):
        return listener.__name__
    return repr(listener)


__all__ = ["Listener", "ThemeStore", "Unsubscribe", "reduce_theme_state"]
