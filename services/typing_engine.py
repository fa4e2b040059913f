# services/typing_engine.py
"""
Scoring engine for one practice run.

A position only ever counts one error: the first wrong keystroke at a
position increments ``error_count`` and the mistake log, retries at the same
position overwrite the displayed character but add nothing. The cursor only
moves on a correct keystroke.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, List, Optional
import logging

from app import calculation, config
from app.errors import EmptyExerciseError, SessionNotFinishedError
from app.models import Exercise, HistoryEntry, new_id
from services.weakkeys import NEWLINE_CHARS, MistakeLog

log = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionState(Enum):
    IDLE = "idle"
    ACTIVE = "active"
    FINISHED = "finished"


class CharState(Enum):
    PENDING = "pending"
    CORRECT = "correct"
    INCORRECT = "incorrect"


def is_newline(ch: str) -> bool:
    return ch in NEWLINE_CHARS


def matches(typed: str, target: str) -> bool:
    if typed == target:
        return True
    return is_newline(target) and typed in ("\r", "\n")


def display_char(ch: str) -> str:
    if is_newline(ch):
        return config.NEWLINE_SYMBOL + "\n"
    if ch == "\t":
        return config.TAB_SYMBOL
    return ch


@dataclass
class TypingSession:
    exercise: Exercise
    target_chars: List[str]
    typed_at: List[Optional[str]]
    cursor: int = 0
    error_count: int = 0
    mistake_log: MistakeLog = field(default_factory=MistakeLog)
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    history_entry: Optional[HistoryEntry] = None

    @property
    def total_chars(self) -> int:
        return len(self.target_chars)

    @property
    def state(self) -> SessionState:
        if self.finished_at is not None:
            return SessionState.FINISHED
        if self.started_at is not None:
            return SessionState.ACTIVE
        return SessionState.IDLE

    @property
    def is_finished(self) -> bool:
        return self.finished_at is not None

    @property
    def typed_count(self) -> int:
        return sum(1 for ch in self.typed_at if ch is not None)

    def char_state(self, i: int) -> CharState:
        typed = self.typed_at[i]
        if typed is None:
            return CharState.PENDING
        return CharState.CORRECT if matches(typed, self.target_chars[i]) else CharState.INCORRECT


@dataclass(frozen=True)
class KeystrokeResult:
    accepted: bool
    matched: bool = False
    finished: bool = False
    cursor: int = 0
    entry: Optional[HistoryEntry] = None


@dataclass(frozen=True)
class LiveStats:
    cpm: int = 0
    error_percent: float = 0.0
    typed_count: int = 0

    @property
    def wpm(self) -> int:
        return calculation.words_per_minute(self.cpm)


def start_session(exercise: Exercise) -> TypingSession:
    text = (exercise.text or "").replace("\r\n", "\n")
    if not text:
        raise EmptyExerciseError(f"Exercise {exercise.name!r} has no text")
    chars = list(text)
    return TypingSession(exercise=exercise, target_chars=chars, typed_at=[None] * len(chars))


def handle_keystroke(session: TypingSession, text: str, now: Optional[datetime] = None) -> KeystrokeResult:
    if session.is_finished or not text or session.cursor >= session.total_chars:
        return KeystrokeResult(accepted=False, finished=session.is_finished, cursor=session.cursor)
    now = now or utc_now()
    c = text[0]
    if session.started_at is None:
        session.started_at = now

    idx = session.cursor
    target = session.target_chars[idx]
    if matches(c, target):
        session.typed_at[idx] = target
        if idx == session.total_chars - 1:
            entry = _finish(session, now)
            return KeystrokeResult(accepted=True, matched=True, finished=True, cursor=session.cursor, entry=entry)
        session.cursor += 1
        return KeystrokeResult(accepted=True, matched=True, cursor=session.cursor)

    if session.typed_at[idx] is None:
        session.error_count += 1
        session.mistake_log.note(target)
    session.typed_at[idx] = c
    return KeystrokeResult(accepted=True, matched=False, cursor=session.cursor)


def _finish(session: TypingSession, now: datetime) -> HistoryEntry:
    session.cursor = session.total_chars
    session.finished_at = now
    total = session.total_chars
    seconds = calculation.elapsed_seconds(session.started_at, now)
    cpm = calculation.characters_per_minute(total, seconds)
    entry = HistoryEntry(
        id=new_id(),
        exercise_id=session.exercise.id,
        exercise_name=session.exercise.name,
        exercise_length=total,
        completion_date=now,
        characters_per_minute=cpm,
        words_per_minute=calculation.words_per_minute(cpm),
        error_percentage=calculation.error_percentage(session.error_count, total),
        total_errors=session.error_count,
        top_mistakes=session.mistake_log.to_dict(),
    )
    session.history_entry = entry
    log.info("Finished %r: %d cpm, %d errors in %.1fs", session.exercise.name, cpm, session.error_count, seconds)
    return entry


def on_session_finished(session: TypingSession) -> HistoryEntry:
    if session.history_entry is None:
        raise SessionNotFinishedError(f"Session for {session.exercise.name!r} is still at {session.cursor}/{session.total_chars}")
    return session.history_entry


def query_live_stats(session: TypingSession, now: Optional[datetime] = None) -> LiveStats:
    typed = session.typed_count
    errors = session.error_count
    end = session.finished_at or now or utc_now()
    seconds = calculation.elapsed_seconds(session.started_at, end)
    return LiveStats(
        cpm=calculation.live_characters_per_minute(typed, errors, seconds),
        error_percent=calculation.error_percentage(errors, typed),
        typed_count=typed,
    )


class TypingEngine:
    """
    Owns one TypingSession for a practice view.
    Listeners are plain callables: on_change(result) after every accepted
    keystroke, on_finished(entry) once when the last character is typed.
    """

    def __init__(self, exercise: Exercise, clock: Clock = utc_now):
        self.session = start_session(exercise)
        self.clock = clock
        self._change_listeners: List[Callable[[KeystrokeResult], None]] = []
        self._finish_listeners: List[Callable[[HistoryEntry], None]] = []

    def on_change(self, fn: Callable[[KeystrokeResult], None]):
        self._change_listeners.append(fn)

    def on_finished(self, fn: Callable[[HistoryEntry], None]):
        self._finish_listeners.append(fn)

    def process_key(self, text: str) -> KeystrokeResult:
        result = handle_keystroke(self.session, text, self.clock())
        if not result.accepted:
            return result
        for fn in list(self._change_listeners):
            fn(result)
        if result.entry is not None:
            for fn in list(self._finish_listeners):
                fn(result.entry)
        return result

    def live_stats(self) -> LiveStats:
        return query_live_stats(self.session, self.clock())

    def char_state(self, i: int) -> CharState:
        return self.session.char_state(i)

    @property
    def history_entry(self) -> HistoryEntry:
        return on_session_finished(self.session)

    @property
    def is_finished(self) -> bool:
        return self.session.is_finished

    @property
    def cursor(self) -> int:
        return self.session.cursor
