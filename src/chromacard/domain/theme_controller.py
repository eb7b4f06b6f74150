"""Theme controller bridging user intents to theme store dispatches."""

from __future__ import annotations

import asyncio
import itertools
import logging
from typing import Any, Callable

from ..theme.models import MalformedThemeError, Theme, coerce_theme
from ..theme.source import ColorSource, ColorSourceError
from .actions import RandomThemeFulfilled, RandomThemeRejected, RandomThemeRequested, ThemeChanged
from .theme_store import ThemeStore

LOGGER = logging.getLogger(__name__)

LoopResolver = Callable[[], asyncio.AbstractEventLoop]


class ThemeController:
    """Owns the interaction with the color source on behalf of the UI.

    Every random theme request gets the next number from a monotonically
    increasing sequence. Only the latest issued request may change the
    theme; results of superseded requests are dropped without being reported
    as errors. The color source itself is never cancelled for supersession.
    """

    def __init__(
        self,
        store: ThemeStore,
        source: ColorSource,
        *,
        loop_resolver: LoopResolver | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            store: The theme store to dispatch into.
            source: Color source used for random theme requests.
            loop_resolver: Callable returning the loop that runs fetches.
                Defaults to the currently running loop.
        """
        self._store = store
        self._source = source
        self._loop_resolver = loop_resolver or asyncio.get_running_loop
        self._sequence = itertools.count(1)
        self._latest_request = 0
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def store(self) -> ThemeStore:
        return self._store

    @property
    def latest_request_id(self) -> int:
        return self._latest_request

    @property
    def pending_requests(self) -> int:
        """Number of fetches still awaiting the color source, superseded ones included."""
        return sum(1 for task in self._tasks if not task.done())

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    def set_theme(self, theme: Theme | Any) -> None:
        """Apply ``theme`` immediately.

        Raises:
            MalformedThemeError: If ``theme`` is missing any color field.
        """
        resolved = coerce_theme(theme)
        self._store.dispatch(ThemeChanged(resolved))

    def request_random_theme(self) -> asyncio.Task[None]:
        """Start fetching a random theme and return the task driving it.

        The store moves to ``PENDING`` before this method returns. Source
        failures end up in the store as ``REJECTED``; the returned task
        never raises them.
        """
        loop = self._loop_resolver()
        request_id = self._next_request_id()
        self._store.dispatch(RandomThemeRequested(request_id))
        task = loop.create_task(self._fetch(request_id), name=f"chromacard-theme-request-{request_id}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def record_initial_theme(self, theme: Theme) -> None:
        """Record the synchronous bootstrap fetch as a fulfilled request."""
        request_id = self._next_request_id()
        self._store.dispatch(RandomThemeRequested(request_id))
        self._store.dispatch(RandomThemeFulfilled(request_id, theme))

    async def wait_idle(self) -> None:
        """Wait until every outstanding fetch has resolved."""
        while self._tasks:
            await asyncio.gather(*tuple(self._tasks), return_exceptions=True)

    async def aclose(self) -> None:
        """Cancel outstanding fetches; used during application shutdown."""
        tasks = [task for task in self._tasks if not task.done()]
        if not tasks:
            return
        LOGGER.debug("Cancelling %d outstanding theme request(s)", len(tasks))
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _next_request_id(self) -> int:
        self._latest_request = next(self._sequence)
        return self._latest_request

    async def _fetch(self, request_id: int) -> None:
        try:
            theme = await self._call_source()
        except ColorSourceError as exc:
            if self._is_superseded(request_id):
                return
            LOGGER.warning("Theme request #%d failed: %s", request_id, exc)
            self._store.dispatch(RandomThemeRejected(request_id, exc))
            return

        if self._is_superseded(request_id):
            return
        LOGGER.debug("Theme request #%d resolved: %s", request_id, theme)
        self._store.dispatch(RandomThemeFulfilled(request_id, theme))

    async def _call_source(self) -> Theme:
        try:
            result = await self._source.generate_theme_async()
        except ColorSourceError:
            raise
        except Exception as exc:
            raise ColorSourceError(f"Color source failed: {exc}") from exc
        try:
            return coerce_theme(result)
        except MalformedThemeError as exc:
            raise ColorSourceError(f"Color source returned a malformed theme: {exc}") from exc

    def _is_superseded(self, request_id: int) -> bool:
        if request_id == self._latest_request:
            return False
        LOGGER.debug(
            "Discarding result of theme request #%d; superseded by #%d",
            request_id,
            self._latest_request,
        )
        return True


__all__ = ["LoopResolver", "ThemeController"]
