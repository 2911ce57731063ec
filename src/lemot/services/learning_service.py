"""Learning service for running practice sessions over the stored collection."""
import logging
import random
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Sequence, Tuple

from sqlalchemy.orm import Session

from lemot import monitoring
from lemot.config import settings
from lemot.errors import InvalidArgumentError, InvalidRecordError
from lemot.models.word import DraftWord, WordRecord
from lemot.services.merger import lemma_key, merge
from lemot.services.progress import record_answer
from lemot.services.selector import custom_session, select_session
from lemot.services.word_service import WordService

logger = logging.getLogger(__name__)


@dataclass
class SessionStats:
    """End of session summary."""
    total_questions: int
    correct_count: int
    graduated_count: int
    updated_words: List[WordRecord] = field(default_factory=list)

    @property
    def accuracy(self) -> int:
        """Percentage of words answered correctly."""
        if not self.total_questions:
            return 0
        return round(self.correct_count / self.total_questions * 100)


def apply_update(collection: Sequence[WordRecord], updated: WordRecord) -> List[WordRecord]:
    """Return the collection with the record of the same id replaced."""
    return [updated if word.id == updated.id else word for word in collection]


def summarize_session(initial: Sequence[WordRecord], final: Sequence[WordRecord]) -> SessionStats:
    """Summarize a finished session from its starting and final records."""
    before = {word.id: word.total_correct for word in initial}
    correct_count = sum(1 for word in final if word.total_correct > before.get(word.id, 0))
    graduated_count = sum(
        1 for word in final if word.streak >= settings.learning.graduation_threshold
    )
    return SessionStats(
        total_questions=len(initial),
        correct_count=correct_count,
        graduated_count=graduated_count,
        updated_words=list(final),
    )


class LearningService:
    """Service for selecting session words and recording answers."""

    def __init__(self, db: Session, rng: Optional[random.Random] = None):
        """Initialize the service with a database session."""
        self.db = db
        self.rng = rng or random.Random()
        self.word_service = WordService(db)

    def import_words(
        self,
        drafts: Sequence[DraftWord],
        history: Sequence[WordRecord] = (),
    ) -> List[WordRecord]:
        """Merge saved history and new drafts into the stored collection."""
        existing = self.word_service.load_collection()
        try:
            collection = merge(existing + self._new_history(existing, history), drafts)
        except InvalidRecordError:
            monitoring.error_count.labels(error_type="invalid_record").inc()
            raise
        added = len(collection) - len(existing)
        self.word_service.save_collection(collection)
        monitoring.words_imported.inc(added)
        logger.info(f"Imported {added} new words, collection has {len(collection)} words")
        return collection

    @staticmethod
    def _new_history(existing: Sequence[WordRecord], history: Sequence[WordRecord]) -> List[WordRecord]:
        """Saved records whose lemma and id are not stored yet.

        A lemma repeated in the history keeps its first position and its last
        record, as in ``merge``.
        """
        known = {lemma_key(word.lemma) for word in existing}
        picked: "OrderedDict[str, WordRecord]" = OrderedDict()
        for record in history:
            key = lemma_key(record.lemma)
            if key not in known:
                picked[key] = record

        taken_ids = {word.id for word in existing}
        records = []
        for record in picked.values():
            if record.id in taken_ids:
                logger.warning(f"Skipping saved word '{record.lemma}': id {record.id} is already in use")
                monitoring.error_count.labels(error_type="duplicate_id").inc()
                continue
            taken_ids.add(record.id)
            records.append(record)
        return records

    def start_session(self, count: Optional[int] = None, today: Optional[date] = None) -> List[WordRecord]:
        """Select words for a new session from the stored collection."""
        if count is None:
            count = settings.learning.default_session_size
        if count > settings.learning.max_session_size:
            raise InvalidArgumentError(
                f"Session size {count} exceeds the maximum of {settings.learning.max_session_size}"
            )
        collection = self.word_service.load_collection()
        session = select_session(collection, count, rng=self.rng, today=today)
        monitoring.sessions_started.inc()
        monitoring.session_words.set(len(session))
        logger.info(f"Started session with {len(session)} of {len(collection)} words")
        return session

    def start_custom_session(self, ids: Sequence[str]) -> List[WordRecord]:
        """Start a session with words picked by the user."""
        session = custom_session(self.word_service.load_collection(), ids)
        monitoring.sessions_started.inc()
        monitoring.session_words.set(len(session))
        return session

    def submit_answer(
        self,
        session: Sequence[WordRecord],
        word_id: str,
        was_correct: bool,
        today: Optional[date] = None,
    ) -> Tuple[List[WordRecord], WordRecord]:
        """Record an answer and store it right away.

        Returns the session with the word replaced and the updated word.
        """
        word = next((w for w in session if w.id == word_id), None)
        if word is None:
            raise InvalidArgumentError(f"Word {word_id} is not part of the session")

        updated = record_answer(word, was_correct, today=today)
        self.word_service.save_word(updated)

        monitoring.answers_recorded.labels(outcome="correct" if was_correct else "wrong").inc()
        if updated.is_graduated and not word.is_graduated:
            monitoring.words_graduated.inc()
        return apply_update(session, updated), updated

    def finish_session(self, initial: Sequence[WordRecord], final: Sequence[WordRecord]) -> SessionStats:
        """Summarize a finished session."""
        stats = summarize_session(initial, final)
        logger.info(
            f"Session finished: {stats.correct_count}/{stats.total_questions} correct, "
            f"{stats.graduated_count} mastered"
        )
        return stats
