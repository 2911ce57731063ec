"""Database models for the trainer."""
from dataclasses import fields

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    Float,
    Integer,
    String,
    Text,
)

from lemot.config import settings
from lemot.models.base import Base, TimestampMixin
from lemot.models.word import WordRecord


class VocabEntry(Base, TimestampMixin):
    """Stored word record."""

    __tablename__ = "vocab_entries"

    id = Column(String, primary_key=True)
    position = Column(Integer, nullable=False, index=True)  # order in the collection
    lemma = Column(String, nullable=False, index=True)
    part_of_speech = Column(String, default="")
    answer_form = Column(String, nullable=False)
    meaning = Column(Text, default="")
    sentence = Column(Text, nullable=False)
    cloze_sentence = Column(Text, nullable=False)

    # Learning stats
    streak = Column(Integer, default=0, nullable=False)
    last_seen = Column(Date, nullable=True)
    weight = Column(Float, default=settings.learning.default_weight, nullable=False)
    total_attempts = Column(Integer, default=0, nullable=False)
    total_correct = Column(Integer, default=0, nullable=False)
    is_graduated = Column(Boolean, default=False, nullable=False)

    def to_record(self) -> WordRecord:
        """Convert the row into a word record."""
        return WordRecord(
            id=self.id,
            lemma=self.lemma,
            meaning=self.meaning or "",
            sentence=self.sentence,
            cloze_sentence=self.cloze_sentence,
            answer_form=self.answer_form,
            part_of_speech=self.part_of_speech or "",
            streak=self.streak,
            last_seen=self.last_seen,
            weight=self.weight,
            total_attempts=self.total_attempts,
            total_correct=self.total_correct,
            is_graduated=self.is_graduated,
        )

    def update_from(self, record: WordRecord) -> None:
        """Copy every field of a word record onto the row."""
        for field in fields(record):
            setattr(self, field.name, getattr(record, field.name))
