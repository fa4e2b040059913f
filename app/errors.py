# app/errors.py


class TypeTutorError(Exception):
    """Base class for application errors."""


class StorageError(TypeTutorError):
    """Reading or writing the data directory failed."""


class EmptyExerciseError(TypeTutorError, ValueError):
    """A practice session was requested for an exercise without text."""


class SessionNotFinishedError(TypeTutorError):
    """Results were requested before the last character was typed."""
