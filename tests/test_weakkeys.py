from datetime import datetime, timezone

from app.models import HistoryEntry
from services.weakkeys import MistakeLog, aggregate_mistakes, mistake_key, top_mistakes


def _entry(mistakes) -> HistoryEntry:
    return HistoryEntry(
        id="H",
        exercise_id="E",
        exercise_name="Sample",
        exercise_length=10,
        completion_date=datetime(2025, 7, 2, tzinfo=timezone.utc),
        characters_per_minute=100,
        words_per_minute=20,
        error_percentage=10.0,
        total_errors=sum(mistakes.values()),
        top_mistakes=mistakes,
    )


def test_newline_targets_share_one_key():
    assert mistake_key("\n") == "⏎"
    assert mistake_key("\r") == "⏎"
    assert mistake_key("\u2028") == "⏎"
    assert mistake_key("a") == "a"
    assert mistake_key(" ") == " "


def test_mistake_log_counts_and_ranks():
    log = MistakeLog()
    for ch in "eeaet\n":
        log.note(ch)
    log.note("")
    assert log.to_dict() == {"e": 3, "a": 1, "t": 1, "⏎": 1}
    assert log.top(2) == [("e", 3), ("a", 1)]
    assert len(log) == 4


def test_top_mistakes_breaks_ties_by_key():
    assert top_mistakes({"z": 2, "b": 2, "q": 5, "c": 1}) == [("q", 5), ("b", 2), ("z", 2)]


def test_aggregate_mistakes_across_history():
    ranked = aggregate_mistakes([_entry({"t": 1, "e": 2}), _entry({"e": 1, "⏎": 4}), _entry({})])
    assert ranked == [("⏎", 4), ("e", 3), ("t", 1)]


def test_aggregate_of_no_history_is_empty():
    assert aggregate_mistakes([]) == []
