from datetime import datetime, timedelta, timezone

import pytest

from app import calculation
from app.models import HistoryEntry


def _entry(day: int, cpm: int, err: float) -> HistoryEntry:
    return HistoryEntry(
        id=f"H{day}",
        exercise_id="E",
        exercise_name="Sample",
        exercise_length=10,
        completion_date=datetime(2025, 7, day, tzinfo=timezone.utc),
        characters_per_minute=cpm,
        words_per_minute=cpm // 5,
        error_percentage=err,
        total_errors=0,
    )


@pytest.mark.parametrize(
    "chars, seconds, expected",
    [
        (100, 60.0, 100),
        (44, 10.0, 264),
        (3, 0.0, 0),
        (3, -1.0, 0),
        (0, 5.0, 0),
    ],
)
def test_characters_per_minute(chars, seconds, expected):
    assert calculation.characters_per_minute(chars, seconds) == expected


@pytest.mark.parametrize("cpm, wpm", [(0, 0), (4, 0), (5, 1), (264, 52), (299, 59)])
def test_words_per_minute_is_floor_of_cpm_over_five(cpm, wpm):
    assert calculation.words_per_minute(cpm) == wpm


def test_error_percentage():
    assert calculation.error_percentage(1, 3) == pytest.approx(33.333, rel=1e-3)
    assert calculation.error_percentage(0, 10) == 0.0
    assert calculation.error_percentage(5, 0) == 0.0


def test_live_cpm_waits_for_more_than_one_second():
    assert calculation.live_characters_per_minute(10, 0, 1.0) == 0
    assert calculation.live_characters_per_minute(10, 0, 2.0) == 300
    assert calculation.live_characters_per_minute(0, 0, 30.0) == 0


def test_live_cpm_subtracts_errors():
    assert calculation.live_characters_per_minute(10, 4, 6.0) == 60


def test_elapsed_seconds():
    start = datetime(2025, 1, 1, tzinfo=timezone.utc)
    assert calculation.elapsed_seconds(start, start + timedelta(seconds=90)) == 90.0
    assert calculation.elapsed_seconds(None, start) == 0.0
    assert calculation.elapsed_seconds(start, start - timedelta(seconds=5)) == 0.0


def test_progress_series_is_oldest_first():
    xs, cpm, err = calculation.progress_series([_entry(3, 300, 1.0), _entry(1, 100, 5.0), _entry(2, 200, 2.5)])
    assert cpm == [100, 200, 300]
    assert err == [5.0, 2.5, 1.0]
    assert xs == sorted(xs)
