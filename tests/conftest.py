"""Shared fixtures: bundled layouts, a Qt core application and a fake clock."""

from __future__ import annotations

import pytest
from PySide6.QtCore import QCoreApplication

from tankan.core.layouts import LayoutRepository
from tankan.core.registry import LayoutRegistry
from tankan.core.timer import SessionTimer


class FakeClock:
    """Monotonic clock the tests advance by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(scope="session", autouse=True)
def qapp():
    """QTimer needs an application instance for its event dispatcher."""
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture(scope="session")
def layout_repo() -> LayoutRepository:
    return LayoutRepository()


@pytest.fixture()
def registry(layout_repo: LayoutRepository) -> LayoutRegistry:
    return LayoutRegistry(layout_repo.all(), default="remington-gail")


@pytest.fixture()
def remington(registry: LayoutRegistry):
    return registry.current_index()


@pytest.fixture()
def inscript(registry: LayoutRegistry):
    registry.select_layout("inscript")
    return registry.current_index()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def make_timer(clock: FakeClock):
    def _make(duration=None) -> SessionTimer:
        return SessionTimer(duration, clock=clock)

    return _make
