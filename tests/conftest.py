"""Shared fixtures for the favourites test suite.

The service under test receives a deterministic identifier factory and a clock
that ticks one second per call, so ordering assertions never depend on
wall-clock resolution.
"""

from __future__ import annotations

import itertools
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from favourites_api.services.favourites import InMemoryFavouriteStore
from favourites_api.services.favourites_service import FavouritesService
from tests import _ensure_repo_on_path


def pytest_configure(config: pytest.Config) -> None:
    """Hook executed by pytest prior to running any tests."""

    _ensure_repo_on_path()


class SequentialIds:
    """Identifier factory yielding ``fav-0001``, ``fav-0002``, ..."""

    def __init__(self, prefix: str = "fav") -> None:
        self._prefix = prefix
        self._counter = itertools.count(1)

    def __call__(self) -> str:
        return f"{self._prefix}-{next(self._counter):04d}"


class TickingClock:
    """Clock advancing by ``step`` on every call."""

    def __init__(
        self,
        start: datetime = datetime(2024, 1, 1, 12, 0, tzinfo=UTC),
        step: timedelta = timedelta(seconds=1),
    ) -> None:
        self.current = start
        self._step = step

    def __call__(self) -> datetime:
        value = self.current
        self.current = value + self._step
        return value


@pytest.fixture
def store() -> InMemoryFavouriteStore:
    return InMemoryFavouriteStore()


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def service(store: InMemoryFavouriteStore, clock: TickingClock) -> FavouritesService:
    """Service wired to a fresh store with deterministic ids and time."""

    return FavouritesService(store, id_factory=SequentialIds(), clock=clock)


@pytest.fixture
def chart_payload() -> dict[str, Any]:
    return {
        "type": "chart",
        "description": "monthly sales",
        "title": "Sales",
        "axis_x_title": "Month",
        "axis_y_title": "€",
        "data": [1, 2.5, 3],
    }


@pytest.fixture
def insight_payload() -> dict[str, Any]:
    return {
        "type": "insight",
        "description": "baseline",
        "text": "40% of millennials spend more than 3 hours on social media daily",
    }


@pytest.fixture
def audience_payload() -> dict[str, Any]:
    return {
        "type": "audience",
        "gender": "female",
        "birth_country": "GR",
        "age_groups": ["25-34", "35-44"],
        "hours_social_daily": 3.5,
        "purchases_last_month": 4,
    }
