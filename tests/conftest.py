"""
Shared fixtures: a FileStore in a temporary directory and a clock the tests
can move forward by hand.
"""
from datetime import datetime, timedelta, timezone

import pytest

from app.models import Exercise
from utils.file_handler import FileStore


class FakeClock:
    def __init__(self, start: datetime = datetime(2025, 7, 2, 12, 0, 0, tzinfo=timezone.utc)):
        self.now = start

    def advance(self, seconds: float) -> datetime:
        self.now = self.now + timedelta(seconds=seconds)
        return self.now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(tmp_path) -> FileStore:
    return FileStore(tmp_path / "TypeTutor")


@pytest.fixture
def cat() -> Exercise:
    return Exercise(id="CAT", name="Cat", text="cat")


@pytest.fixture
def make_exercise():
    def _make(text: str, name: str = "Sample") -> Exercise:
        return Exercise.create(name, text)
    return _make
