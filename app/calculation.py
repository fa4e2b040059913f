from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from app import config
from app.models import HistoryEntry


def elapsed_seconds(start: Optional[datetime], end: Optional[datetime]) -> float:
    if start is None or end is None:
        return 0.0
    return max(0.0, (end - start).total_seconds())


def characters_per_minute(chars: int, seconds: float) -> int:
    """
    CPM = chars / seconds * 60, rounded.
    A zero or negative duration yields 0 instead of inf/NaN.
    """
    if seconds <= 0 or chars <= 0:
        return 0
    return int(round(chars / seconds * 60.0))


def words_per_minute(cpm: int) -> int:
    # a "word" is five characters
    return max(0, cpm) // 5


def error_percentage(errors: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return errors / total * 100.0


def live_characters_per_minute(typed: int, errors: int, seconds: float) -> int:
    """
    Running CPM while typing: correct chars are typed minus errors so far.
    Readings within the first second are suppressed.
    """
    if typed <= 0 or seconds <= config.LIVE_MIN_ELAPSED_SECONDS:
        return 0
    return characters_per_minute(typed - errors, seconds)


def progress_series(entries: Iterable[HistoryEntry]) -> Tuple[List[float], List[int], List[float]]:
    """
    Oldest-first (timestamps, cpm, error %) for the progress chart.
    """
    ordered = sorted(entries, key=lambda e: e.completion_date)
    xs = [e.completion_date.timestamp() for e in ordered]
    cpm = [e.characters_per_minute for e in ordered]
    err = [e.error_percentage for e in ordered]
    return xs, cpm, err
