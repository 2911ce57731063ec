"""Error conditions raised by the learning engine."""
from typing import Optional


class InvalidArgumentError(ValueError):
    """A caller passed an argument outside the accepted range."""


class InvalidRecordError(ValueError):
    """A word record violates a data model invariant."""

    def __init__(self, message: str, lemma: Optional[str] = None):
        super().__init__(message)
        self.lemma = lemma


class ImportFormatError(ValueError):
    """Saved progress data could not be read."""
