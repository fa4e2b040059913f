# app/models.py
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict
import uuid


def new_id() -> str:
    return str(uuid.uuid4()).upper()


def parse_date(value: str) -> datetime:
    # fromisoformat only understands a trailing "Z" from 3.11 on
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_date(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass
class Exercise:
    id: str
    name: str
    text: str

    @classmethod
    def create(cls, name: str = "", text: str = "") -> "Exercise":
        return cls(id=new_id(), name=name, text=text)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Exercise":
        if not isinstance(d, dict):
            raise ValueError(f"Exercise must be an object, got {type(d).__name__}")
        missing = {"id", "name", "text"} - set(d.keys())
        if missing:
            raise ValueError(f"Missing exercise keys: {', '.join(sorted(missing))}")
        return cls(id=str(d["id"]), name=str(d["name"]), text=str(d["text"]))

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "text": self.text}


@dataclass(frozen=True)
class HistoryEntry:
    id: str
    exercise_id: str
    exercise_name: str
    exercise_length: int
    completion_date: datetime
    characters_per_minute: int
    words_per_minute: int
    error_percentage: float
    total_errors: int
    top_mistakes: Dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "HistoryEntry":
        if not isinstance(d, dict):
            raise ValueError(f"History entry must be an object, got {type(d).__name__}")
        mistakes = d.get("topMistakes") or {}
        if not isinstance(mistakes, dict):
            raise ValueError("topMistakes must be an object")
        try:
            return cls(
                id=str(d["id"]),
                exercise_id=str(d["exerciseId"]),
                exercise_name=str(d["exerciseName"]),
                exercise_length=int(d["exerciseLength"]),
                completion_date=parse_date(str(d["completionDate"])),
                characters_per_minute=int(d["charactersPerMinute"]),
                words_per_minute=int(d["wordsPerMinute"]),
                error_percentage=float(d["errorPercentage"]),
                total_errors=int(d["totalErrors"]),
                top_mistakes={str(k): int(v) for k, v in mistakes.items()},
            )
        except KeyError as e:
            raise ValueError(f"Missing history key: {e.args[0]}") from e

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "exerciseId": self.exercise_id,
            "exerciseName": self.exercise_name,
            "exerciseLength": self.exercise_length,
            "completionDate": format_date(self.completion_date),
            "charactersPerMinute": self.characters_per_minute,
            "wordsPerMinute": self.words_per_minute,
            "errorPercentage": self.error_percentage,
            "totalErrors": self.total_errors,
            "topMistakes": dict(self.top_mistakes),
        }
