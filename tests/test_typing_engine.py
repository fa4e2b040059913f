"""
Scoring engine: keystroke state machine, completion stats, live stats.
"""
from datetime import timedelta

import pytest

from app.errors import EmptyExerciseError, SessionNotFinishedError
from services.typing_engine import (
    CharState,
    SessionState,
    TypingEngine,
    display_char,
    handle_keystroke,
    on_session_finished,
    query_live_stats,
    start_session,
)


def type_all(session, keys, clock, step=1.0):
    results = []
    for k in keys:
        results.append(handle_keystroke(session, k, clock()))
        clock.advance(step)
    return results


def test_start_session_is_fresh(cat):
    s = start_session(cat)
    assert s.target_chars == ["c", "a", "t"]
    assert s.typed_at == [None, None, None]
    assert s.cursor == 0
    assert s.error_count == 0
    assert s.mistake_log.to_dict() == {}
    assert s.started_at is None and s.finished_at is None
    assert s.state is SessionState.IDLE


def test_empty_exercise_is_rejected(make_exercise):
    with pytest.raises(EmptyExerciseError):
        start_session(make_exercise(""))


def test_empty_exercise_error_is_a_value_error(make_exercise):
    with pytest.raises(ValueError):
        TypingEngine(make_exercise(""))


@pytest.mark.parametrize("text", ["a", "hello world", "tab\there", "two\nlines\n", "ünïcödé ✓"])
def test_perfect_typing_finishes_without_errors(make_exercise, clock, text):
    s = start_session(make_exercise(text))
    results = type_all(s, list(text), clock)
    assert all(r.accepted and r.matched for r in results)
    assert [r.finished for r in results] == [False] * (len(text) - 1) + [True]
    assert s.state is SessionState.FINISHED
    assert s.error_count == 0
    assert s.cursor == len(text)


def test_first_keystroke_starts_the_clock(cat, clock):
    s = start_session(cat)
    clock.advance(30)  # idle time before typing does not count
    handle_keystroke(s, "x", clock())
    assert s.started_at == clock.now
    assert s.state is SessionState.ACTIVE


def test_cat_scenario(cat, clock):
    s = start_session(cat)
    type_all(s, ["c", "a", "x", "t"], clock)
    assert s.cursor == 3
    assert s.error_count == 1
    assert s.mistake_log.to_dict() == {"t": 1}
    assert s.typed_at == ["c", "a", "t"]
    entry = on_session_finished(s)
    assert entry.error_percentage == pytest.approx(100 / 3)
    assert entry.total_errors == 1
    assert entry.top_mistakes == {"t": 1}


def test_wrong_key_does_not_advance(cat, clock):
    s = start_session(cat)
    r = handle_keystroke(s, "z", clock())
    assert r.accepted and not r.matched
    assert s.cursor == 0
    assert s.typed_at[0] == "z"
    assert s.char_state(0) is CharState.INCORRECT


def test_only_first_attempt_counts_as_error(cat, clock):
    """Retrying a position twice with wrong keys is still one error."""
    s = start_session(cat)
    type_all(s, ["x", "y"], clock)
    assert s.error_count == 1
    assert s.mistake_log.to_dict() == {"c": 1}
    assert s.typed_at[0] == "y"
    handle_keystroke(s, "c", clock())
    assert s.error_count == 1
    assert s.typed_at[0] == "c"
    assert s.char_state(0) is CharState.CORRECT


def test_same_character_mistyped_at_two_positions(make_exercise, clock):
    s = start_session(make_exercise("aba"))
    type_all(s, ["x", "a", "b", "y", "a"], clock)
    assert s.error_count == 2
    assert s.mistake_log.to_dict() == {"a": 2}


@pytest.mark.parametrize("key", ["\r", "\n"])
def test_newline_accepts_cr_or_lf(make_exercise, clock, key):
    s = start_session(make_exercise("a\nb"))
    type_all(s, ["a", key], clock)
    assert s.cursor == 2
    assert s.error_count == 0
    assert s.typed_at[1] == "\n"


def test_newline_scenario_with_carriage_return(make_exercise, clock):
    s = start_session(make_exercise("ab\ncd"))
    results = type_all(s, ["a", "b", "\r", "c", "d"], clock)
    assert results[-1].finished
    assert s.is_finished
    assert s.error_count == 0


def test_crlf_in_text_is_one_position(make_exercise, clock):
    s = start_session(make_exercise("a\r\nb"))
    assert s.target_chars == ["a", "\n", "b"]
    type_all(s, ["a", "\r", "b"], clock)
    assert s.is_finished


def test_missed_newline_uses_return_symbol(make_exercise, clock):
    s = start_session(make_exercise("a\nb"))
    type_all(s, ["a", " "], clock)
    assert s.mistake_log.to_dict() == {"⏎": 1}


def test_cr_does_not_match_ordinary_character(cat, clock):
    s = start_session(cat)
    r = handle_keystroke(s, "\r", clock())
    assert not r.matched
    assert s.error_count == 1


def test_only_first_character_of_input_is_used(cat, clock):
    s = start_session(cat)
    handle_keystroke(s, "cat", clock())
    assert s.cursor == 1
    assert s.typed_at == ["c", None, None]


def test_empty_input_is_ignored(cat, clock):
    s = start_session(cat)
    r = handle_keystroke(s, "", clock())
    assert not r.accepted
    assert s.started_at is None


def test_input_after_finish_is_ignored(cat, clock):
    s = start_session(cat)
    type_all(s, "cat", clock)
    entry = on_session_finished(s)
    before = (s.cursor, s.error_count, s.mistake_log.to_dict(), list(s.typed_at), s.finished_at)
    for k in ["x", "c", "\r", "t"]:
        r = handle_keystroke(s, k, clock.advance(1))
        assert not r.accepted
        assert r.finished
    assert (s.cursor, s.error_count, s.mistake_log.to_dict(), list(s.typed_at), s.finished_at) == before
    assert on_session_finished(s) is entry


def test_completion_statistics(make_exercise, clock):
    text = "x" * 50
    s = start_session(make_exercise(text))
    start = clock.now
    for _ in range(50):
        handle_keystroke(s, "x", clock())
        clock.advance(0.25)
    # last keystroke at 49 * 0.25 = 12.25 s after the first
    entry = on_session_finished(s)
    assert s.finished_at == start + timedelta(seconds=12.25)
    assert entry.characters_per_minute == round(50 / 12.25 * 60)
    assert entry.words_per_minute == entry.characters_per_minute // 5
    assert entry.error_percentage == 0.0
    assert entry.exercise_length == 50
    assert entry.completion_date == s.finished_at


def test_completion_in_the_same_instant_degrades_to_zero(make_exercise, clock):
    s = start_session(make_exercise("a"))
    r = handle_keystroke(s, "a", clock())
    assert r.finished
    assert r.entry.characters_per_minute == 0
    assert r.entry.words_per_minute == 0


def test_history_entry_snapshots_exercise(cat, clock):
    s = start_session(cat)
    results = type_all(s, "cat", clock)
    entry = results[-1].entry
    assert entry is not None
    assert entry.exercise_id == "CAT"
    assert entry.exercise_name == "Cat"
    assert entry.exercise_length == 3


def test_results_before_finish_raise(cat, clock):
    s = start_session(cat)
    handle_keystroke(s, "c", clock())
    with pytest.raises(SessionNotFinishedError):
        on_session_finished(s)


# ---------------- live stats ----------------

def test_live_stats_before_first_keystroke(cat, clock):
    live = query_live_stats(start_session(cat), clock())
    assert (live.cpm, live.error_percent, live.typed_count) == (0, 0.0, 0)


def test_live_stats_suppress_first_second(make_exercise, clock):
    s = start_session(make_exercise("abcdef"))
    type_all(s, "abc", clock, step=0.3)
    live = query_live_stats(s, s.started_at + timedelta(seconds=1))
    assert live.typed_count == 3
    assert live.cpm == 0


def test_live_stats_use_typed_minus_errors(make_exercise, clock):
    s = start_session(make_exercise("abcdefghij"))
    type_all(s, ["a", "b", "x", "c", "d"], clock, step=1.0)
    # typed slots: a b c d -> 4, one error so far
    now = s.started_at + timedelta(seconds=6)
    live = query_live_stats(s, now)
    assert live.typed_count == 4
    assert live.error_percent == pytest.approx(25.0)
    assert live.cpm == round((4 - 1) / 6 * 60)
    assert live.wpm == live.cpm // 5


def test_live_stats_count_pending_wrong_slot_as_typed(make_exercise, clock):
    s = start_session(make_exercise("abc"))
    type_all(s, ["a", "x"], clock)
    live = query_live_stats(s, clock())
    assert live.typed_count == 2
    assert live.error_percent == pytest.approx(50.0)


def test_live_stats_do_not_mutate(make_exercise, clock):
    s = start_session(make_exercise("abc"))
    type_all(s, ["a", "x"], clock)
    snapshot = (s.cursor, s.error_count, s.mistake_log.to_dict(), list(s.typed_at))
    for _ in range(5):
        query_live_stats(s, clock.advance(1))
    assert (s.cursor, s.error_count, s.mistake_log.to_dict(), list(s.typed_at)) == snapshot


def test_live_stats_freeze_after_finish(make_exercise, clock):
    s = start_session(make_exercise("abc"))
    type_all(s, "abc", clock, step=1.0)
    first = query_live_stats(s, clock())
    later = query_live_stats(s, clock.advance(600))
    assert first == later


# ---------------- engine wrapper ----------------

def test_engine_notifies_listeners(cat, clock):
    engine = TypingEngine(cat, clock=clock)
    changes, finished = [], []
    engine.on_change(changes.append)
    engine.on_finished(finished.append)

    for k in "cxat":
        engine.process_key(k)
        clock.advance(1)
    engine.process_key("z")  # ignored after finish

    assert len(changes) == 4
    assert [r.matched for r in changes] == [True, False, True, True]
    assert len(finished) == 1
    assert engine.history_entry is finished[0]
    assert engine.is_finished


def test_engine_live_stats_use_clock(cat, clock):
    engine = TypingEngine(cat, clock=clock)
    engine.process_key("c")
    clock.advance(2)
    engine.process_key("a")
    clock.advance(1)
    # 2 correct chars in 3 seconds
    assert engine.live_stats().cpm == 40


def test_char_states_and_cursor(cat, clock):
    engine = TypingEngine(cat, clock=clock)
    engine.process_key("c")
    engine.process_key("q")
    assert [engine.char_state(i) for i in range(3)] == [
        CharState.CORRECT, CharState.INCORRECT, CharState.PENDING,
    ]
    assert engine.cursor == 1


def test_display_char_for_special_characters():
    assert display_char("\n") == "⏎\n"
    assert display_char("\t") == "→"
    assert display_char("a") == "a"
