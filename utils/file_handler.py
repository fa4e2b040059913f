import json, os
import logging
import tempfile
from pathlib import Path
from typing import Any, List, Tuple

from app import config
from app.errors import StorageError
from app.models import Exercise, HistoryEntry
from app.themes import (
    AppConfiguration,
    configuration_from_dict,
    configuration_to_dict,
    default_configuration,
)

log = logging.getLogger(__name__)


def _write_json(path: Path, payload: Any) -> None:
    """Pretty-printed UTF-8 JSON, written to a temp file and moved into place."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=".", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=2)
            os.replace(tmp, path)
        except BaseException:
            if os.path.exists(tmp):
                os.remove(tmp)
            raise
    except OSError as e:
        raise StorageError(f"Could not write {path}: {e}") from e


def _read_json(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def read_text_file(path) -> Tuple[str, str]:
    """Return (name, text) for a plain-text file; the name is the file stem."""
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise StorageError(f"Could not read {p}: {e}") from e
    return p.stem, text


class FileStore:
    """
    One JSON document per exercise and per history entry, plus config.json.

        <root>/config.json
        <root>/exercises/<id>.json
        <root>/history/<id>.json
    """

    def __init__(self, root: Path = config.DATA_DIR):
        self.root = Path(root)
        self.config_path = self.root / config.CONFIG_PATH.name
        self.exercises_dir = self.root / config.EXERCISES_DIR.name
        self.history_dir = self.root / config.HISTORY_DIR.name
        try:
            self.exercises_dir.mkdir(parents=True, exist_ok=True)
            self.history_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Could not create data directory {self.root}: {e}") from e

    # -------- configuration --------
    def load_configuration(self) -> AppConfiguration:
        if self.config_path.exists():
            try:
                return configuration_from_dict(_read_json(self.config_path))
            except (OSError, ValueError, TypeError, KeyError) as e:
                log.warning("Ignoring unreadable %s: %s", self.config_path, e)

        cfg = default_configuration()
        self.save_configuration(cfg)
        if not any(self.exercises_dir.glob("*.json")):
            name, text = config.DEFAULT_EXERCISE
            self.save_exercise(Exercise.create(name, text))
        return cfg

    def save_configuration(self, cfg: AppConfiguration) -> None:
        _write_json(self.config_path, configuration_to_dict(cfg))

    # -------- exercises --------
    def _exercise_path(self, exercise_id: str) -> Path:
        return self.exercises_dir / f"{exercise_id}.json"

    def load_exercises(self) -> List[Exercise]:
        out = []
        for p in sorted(self.exercises_dir.glob("*.json")):
            try:
                out.append(Exercise.from_dict(_read_json(p)))
            except (OSError, ValueError, TypeError) as e:
                log.warning("Skipping exercise file %s: %s", p.name, e)
        return out

    def save_exercise(self, exercise: Exercise) -> None:
        _write_json(self._exercise_path(exercise.id), exercise.to_dict())
        log.info("Saved exercise %s (%s)", exercise.id, exercise.name)

    def delete_exercise(self, exercise: Exercise) -> None:
        try:
            self._exercise_path(exercise.id).unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Could not delete exercise {exercise.id}: {e}") from e

    # -------- history --------
    def load_history(self) -> List[HistoryEntry]:
        out = []
        for p in sorted(self.history_dir.glob("*.json")):
            try:
                out.append(HistoryEntry.from_dict(_read_json(p)))
            except (OSError, ValueError, TypeError) as e:
                log.warning("Skipping history file %s: %s", p.name, e)
        return out

    def save_history_entry(self, entry: HistoryEntry) -> None:
        _write_json(self.history_dir / f"{entry.id}.json", entry.to_dict())
        log.info("Saved history entry %s for %s", entry.id, entry.exercise_name)
