# app/config.py
import os
from pathlib import Path

APP_NAME = "TypeTutor"

DATA_DIR = Path(os.environ.get("TYPETUTOR_HOME") or Path.home() / "Documents" / APP_NAME)
CONFIG_PATH = DATA_DIR / "config.json"
EXERCISES_DIR = DATA_DIR / "exercises"
HISTORY_DIR = DATA_DIR / "history"
LOG_FILE = DATA_DIR / "typetutor.log"

# Live stats
LIVE_TICK_MS = 1000
LIVE_MIN_ELAPSED_SECONDS = 1.0  # earlier CPM readings are too jumpy to show

# Rendering of special characters
NEWLINE_SYMBOL = "⏎"
TAB_SYMBOL = "→"

TOP_MISTAKES_SHOWN = 3

DEFAULT_EXERCISE = ("Pangram", "The quick brown fox jumps over the lazy dog.")
