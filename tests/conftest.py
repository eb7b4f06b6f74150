"""Shared pytest fixtures and color source stubs."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from chromacard.domain.theme_controller import ThemeController
from chromacard.domain.theme_store import ThemeStore
from chromacard.theme.models import Theme


class DeferredColorSource:
    """Color source whose async results are resolved by the test.

    Each ``generate_theme_async`` call parks on a future appended to
    ``pending`` so tests decide when, and in which order, requests resolve.
    """

    def __init__(self, initial: Theme) -> None:
        self.initial = initial
        self.pending: list[asyncio.Future[Any]] = []
        self.sync_calls = 0

    def generate_theme(self) -> Theme:
        self.sync_calls += 1
        return self.initial

    async def generate_theme_async(self) -> Theme:
        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self.pending.append(future)
        return await future


class StaticColorSource:
    """Color source that always returns (or raises) the configured value."""

    def __init__(self, result: Any = None, *, error: BaseException | None = None) -> None:
        self.result = result
        self.error = error
        self.calls = 0

    def generate_theme(self) -> Any:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.result

    async def generate_theme_async(self) -> Any:
        return self.generate_theme()


async def settle(rounds: int = 5) -> None:
    """Let scheduled tasks run up to their next suspension point."""

    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def bootstrap_theme() -> Theme:
    return Theme(background="#000000", foreground="#ffffff", primary="#ff0000")


@pytest.fixture
def mocked_theme() -> Theme:
    return Theme(background="#111111", foreground="#eeeeee", primary="#00ff00")


@pytest.fixture
def store(bootstrap_theme: Theme) -> ThemeStore:
    return ThemeStore(bootstrap_theme)


@pytest.fixture
def deferred_source(bootstrap_theme: Theme) -> DeferredColorSource:
    return DeferredColorSource(bootstrap_theme)


@pytest.fixture
def controller(store: ThemeStore, deferred_source: DeferredColorSource) -> ThemeController:
    return ThemeController(store, deferred_source)


@pytest.fixture
def settle_tasks():
    return settle


@pytest.fixture
def make_static_source():
    return StaticColorSource
