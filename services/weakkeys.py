# services/weakkeys.py
from collections import Counter
from typing import Dict, Iterable, List, Mapping, Tuple

from app import config
from app.models import HistoryEntry

NEWLINE_CHARS = frozenset("\n\r\x0b\x0c\x85\u2028\u2029")


def mistake_key(target: str) -> str:
    return config.NEWLINE_SYMBOL if target in NEWLINE_CHARS else target


def rank(counts: Mapping[str, int], limit: int = 0) -> List[Tuple[str, int]]:
    ranked = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
    return ranked[:limit] if limit > 0 else ranked


class MistakeLog:
    """First-attempt mistakes keyed by the character that should have been typed."""

    def __init__(self):
        self.counts = Counter()

    def note(self, target: str):
        if not target:
            return
        self.counts[mistake_key(target)] += 1

    def top(self, n: int = config.TOP_MISTAKES_SHOWN) -> List[Tuple[str, int]]:
        return rank(self.counts, n)

    def to_dict(self) -> Dict[str, int]:
        return dict(self.counts)

    def __len__(self):
        return len(self.counts)


def top_mistakes(mistakes: Mapping[str, int], n: int = config.TOP_MISTAKES_SHOWN) -> List[Tuple[str, int]]:
    return rank(mistakes, n)


def aggregate_mistakes(entries: Iterable[HistoryEntry]) -> List[Tuple[str, int]]:
    """Sum the mistake tables of many history entries, most frequent first."""
    total = Counter()
    for e in entries:
        total.update(e.top_mistakes)
    return rank(total)
