from __future__ import annotations
from typing import Callable, Dict, Generic, List, Optional, TypeVar
import logging

from app.models import Exercise, HistoryEntry
from app.themes import AppConfiguration, Theme
from app.validation import clean_name
from utils.file_handler import FileStore

log = logging.getLogger(__name__)

Listener = Callable[[str], None]

EXERCISES = "exercises"
HISTORY = "history"
CONFIGURATION = "configuration"


class AppState:
    """
    In-memory exercises, history and configuration backed by a FileStore.
    Every mutation is written through and announced to listeners with a topic.
    """

    def __init__(self, store: FileStore):
        self.store = store
        self.configuration: AppConfiguration = store.load_configuration()
        self.exercises: List[Exercise] = store.load_exercises()
        self.history: List[HistoryEntry] = store.load_history()
        self._listeners: List[Listener] = []

    # -------- notifications --------
    def subscribe(self, fn: Listener) -> Callable[[], None]:
        self._listeners.append(fn)

        def unsubscribe():
            if fn in self._listeners:
                self._listeners.remove(fn)

        return unsubscribe

    def _notify(self, topic: str):
        for fn in list(self._listeners):
            fn(topic)

    # -------- configuration --------
    @property
    def current_theme(self) -> Theme:
        return self.configuration.current_theme

    def save_configuration(self):
        self.store.save_configuration(self.configuration)
        self._notify(CONFIGURATION)

    def apply_configuration(self, cfg: AppConfiguration):
        self.configuration = cfg
        self.save_configuration()

    # -------- exercises --------
    def find_exercise(self, exercise_id: str) -> Optional[Exercise]:
        return next((e for e in self.exercises if e.id == exercise_id), None)

    def has_exercise(self, exercise_id: str) -> bool:
        return self.find_exercise(exercise_id) is not None

    def add_exercise(self, exercise: Exercise):
        self.store.save_exercise(exercise)
        self.exercises.append(exercise)
        self._notify(EXERCISES)

    def update_exercise(self, exercise: Exercise) -> bool:
        for i, e in enumerate(self.exercises):
            if e.id == exercise.id:
                self.store.save_exercise(exercise)
                self.exercises[i] = exercise
                self._notify(EXERCISES)
                return True
        return False

    def rename_exercise(self, exercise_id: str, new_name: str) -> bool:
        current = self.find_exercise(exercise_id)
        if current is None:
            return False
        return self.update_exercise(Exercise(id=current.id, name=clean_name(new_name), text=current.text))

    def delete_exercise(self, exercise: Exercise):
        self.store.delete_exercise(exercise)
        self.exercises = [e for e in self.exercises if e.id != exercise.id]
        self._notify(EXERCISES)

    # -------- history --------
    def add_history_entry(self, entry: HistoryEntry):
        self.store.save_history_entry(entry)
        self.history.append(entry)
        self._notify(HISTORY)

    def history_sorted(self) -> List[HistoryEntry]:
        return sorted(self.history, key=lambda e: e.completion_date)


E = TypeVar("E")


class EditorRegistry(Generic[E]):
    """
    Open editor windows keyed by exercise id. The shell calls open() to show
    an editor (reusing one that is already open) and close() from the
    editor's close handler.
    """

    def __init__(self):
        self._open: Dict[str, E] = {}

    def open(self, exercise_id: str, factory: Callable[[], E]) -> tuple[E, bool]:
        """Return (editor, created)."""
        existing = self._open.get(exercise_id)
        if existing is not None:
            return existing, False
        editor = factory()
        self._open[exercise_id] = editor
        log.debug("Editor opened for %s", exercise_id)
        return editor, True

    def close(self, exercise_id: str) -> Optional[E]:
        return self._open.pop(exercise_id, None)

    def is_open(self, exercise_id: str) -> bool:
        return exercise_id in self._open

    def __len__(self):
        return len(self._open)
