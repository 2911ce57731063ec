"""Service for managing the stored word collection."""
import logging
from typing import Dict, List, Optional, Sequence

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from lemot.models.models import VocabEntry
from lemot.models.word import WordRecord
from lemot.services.progress import edit_word, reset_progress

logger = logging.getLogger(__name__)


class WordService:
    """Service for managing the stored word collection."""

    def __init__(self, db: Session):
        """Initialize the service with a database session."""
        self.db = db

    def _get_entry(self, word_id: str) -> Optional[VocabEntry]:
        return self.db.query(VocabEntry).filter(VocabEntry.id == word_id).first()

    def get_word(self, word_id: str) -> Optional[WordRecord]:
        """Get a word by its ID."""
        entry = self._get_entry(word_id)
        return entry.to_record() if entry else None

    def get_word_by_lemma(self, lemma: str) -> Optional[WordRecord]:
        """Get a word by its lemma, ignoring case."""
        entry = (
            self.db.query(VocabEntry)
            .filter(func.lower(VocabEntry.lemma) == lemma.lower())
            .first()
        )
        return entry.to_record() if entry else None

    def load_collection(self) -> List[WordRecord]:
        """Load the whole collection in its stored order."""
        entries = self.db.query(VocabEntry).order_by(VocabEntry.position).all()
        return [entry.to_record() for entry in entries]

    def save_collection(self, records: Sequence[WordRecord]) -> None:
        """Replace the stored collection, keeping the given order."""
        existing = {entry.id: entry for entry in self.db.query(VocabEntry).all()}
        keep_ids = set()
        for position, record in enumerate(records):
            entry = existing.get(record.id)
            if entry is None:
                entry = VocabEntry(id=record.id)
                self.db.add(entry)
            entry.update_from(record)
            entry.position = position
            keep_ids.add(record.id)

        for word_id, entry in existing.items():
            if word_id not in keep_ids:
                self.db.delete(entry)

        self.db.commit()
        logger.info(f"Saved collection of {len(records)} words")

    def save_word(self, record: WordRecord) -> WordRecord:
        """Store a single word, appending it if it is new."""
        entry = self._get_entry(record.id)
        if entry is None:
            position = self.db.query(func.coalesce(func.max(VocabEntry.position), -1)).scalar() + 1
            entry = VocabEntry(id=record.id, position=position)
            self.db.add(entry)
        entry.update_from(record)
        self.db.commit()
        return record

    def update_word(self, word_id: str, **changes) -> Optional[WordRecord]:
        """Edit a word's content fields."""
        record = self.get_word(word_id)
        if not record:
            return None
        return self.save_word(edit_word(record, **changes))

    def reset_word(self, word_id: str) -> Optional[WordRecord]:
        """Reset a word's learning state."""
        record = self.get_word(word_id)
        if not record:
            return None
        logger.info(f"Resetting progress for '{record.lemma}'")
        return self.save_word(reset_progress(record))

    def reset_all(self) -> List[WordRecord]:
        """Reset the learning state of every word."""
        records = [reset_progress(record) for record in self.load_collection()]
        self.save_collection(records)
        logger.info(f"Reset progress for {len(records)} words")
        return records

    def get_word_count(self) -> int:
        """Get the count of words in the collection."""
        return self.db.query(VocabEntry).count()

    def search_words(self, query: str, limit: Optional[int] = None) -> List[WordRecord]:
        """Search words by lemma or meaning, most practiced first."""
        search_query = self.db.query(VocabEntry)
        if query.strip():
            pattern = f"%{query.strip()}%"
            search_query = search_query.filter(
                or_(
                    VocabEntry.lemma.ilike(pattern),
                    VocabEntry.meaning.ilike(pattern),
                )
            )
        search_query = search_query.order_by(VocabEntry.streak.desc(), VocabEntry.position)
        if limit:
            search_query = search_query.limit(limit)
        return [entry.to_record() for entry in search_query.all()]

    def get_stats(self) -> Dict[str, int]:
        """Get collection totals."""
        return {
            "total": self.db.query(VocabEntry).count(),
            "started": self.db.query(VocabEntry).filter(VocabEntry.total_attempts > 0).count(),
            "graduated": self.db.query(VocabEntry).filter(VocabEntry.is_graduated == True).count(),  # noqa: E712
        }
