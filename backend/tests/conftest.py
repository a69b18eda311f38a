import itertools
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from smart_toilets.config import Settings
from smart_toilets.main import create_app

START = datetime(2024, 1, 15, 8, 0, tzinfo=timezone.utc)


class SequenceRandom:
    """Random source replaying a fixed list of draws forever."""

    def __init__(self, values):
        self._values = itertools.cycle(values)

    def random(self) -> float:
        return next(self._values)


class TickingClock:
    """Clock that advances one second per call."""

    def __init__(self, start: datetime = START):
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(seconds=1)
        return current


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def settings():
    return Settings(ANALYSIS_DELAY_SECONDS=0, RANDOM_SEED=1234)


@pytest.fixture
def app(settings, clock):
    return create_app(settings=settings, clock=clock)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
