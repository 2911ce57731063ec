"""Word records and their learning state."""
import re
import uuid
from dataclasses import asdict, dataclass
from datetime import UTC, date, datetime
from typing import Any, Dict, Optional

from lemot.config import settings
from lemot.errors import InvalidRecordError

# Days since an absent last_seen date
NEVER_SEEN_DAYS = 9999


def today() -> date:
    """Get the current UTC date."""
    return datetime.now(UTC).date()


def new_id() -> str:
    """Generate a new record identifier."""
    return str(uuid.uuid4())


def days_since(last_seen: Optional[date], current: Optional[date] = None) -> int:
    """Get the number of days between last_seen and the current date."""
    if last_seen is None:
        return NEVER_SEEN_DAYS
    current = current or today()
    return abs((current - last_seen).days)


def make_cloze(sentence: str, answer_form: str, blank: Optional[str] = None) -> str:
    """Replace the first case-insensitive occurrence of answer_form with a blank."""
    blank = blank or settings.content.blank_marker
    if not answer_form:
        return sentence
    return re.sub(re.escape(answer_form), blank, sentence, count=1, flags=re.IGNORECASE)


def parse_date(value: Any) -> Optional[date]:
    """Parse a YYYY-MM-DD string (or date) into a date."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


@dataclass(frozen=True)
class DraftWord:
    """Content of an imported word, without learning state."""
    lemma: str
    meaning: str = ""
    sentence: str = ""
    cloze_sentence: str = ""
    part_of_speech: str = ""
    answer_form: str = ""
    id: Optional[str] = None


@dataclass(frozen=True)
class WordRecord:
    """One vocabulary item and its learning state."""
    id: str
    lemma: str
    meaning: str
    sentence: str
    cloze_sentence: str
    answer_form: str
    part_of_speech: str = ""

    # Learning state
    streak: int = 0
    last_seen: Optional[date] = None
    weight: float = 0.5
    total_attempts: int = 0
    total_correct: int = 0
    is_graduated: bool = False

    @property
    def correct_text(self) -> str:
        """Text expected as the correct answer."""
        return self.answer_form or self.lemma

    @classmethod
    def from_draft(cls, draft: DraftWord) -> "WordRecord":
        """Create a record with the initial learning state from a draft."""
        answer_form = draft.answer_form or draft.lemma
        sentence = draft.sentence or draft.lemma
        return cls(
            id=draft.id or new_id(),
            lemma=draft.lemma,
            meaning=draft.meaning,
            sentence=sentence,
            cloze_sentence=draft.cloze_sentence or make_cloze(sentence, answer_form),
            answer_form=answer_form,
            part_of_speech=draft.part_of_speech,
            weight=settings.learning.default_weight,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the record with every field present."""
        data = asdict(self)
        data["last_seen"] = self.last_seen.isoformat() if self.last_seen else None
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WordRecord":
        """Restore a record from its serialized form.

        Older progress files store the lemma under ``word`` and may omit
        counters, which then start from the initial learning state.
        """
        lemma = data.get("lemma") or data.get("word") or ""
        answer_form = data.get("answer_form") or lemma
        sentence = data.get("sentence") or ""
        return cls(
            id=str(data.get("id") or new_id()),
            lemma=lemma,
            meaning=data.get("meaning") or "",
            sentence=sentence,
            cloze_sentence=data.get("cloze_sentence") or make_cloze(sentence, answer_form),
            answer_form=answer_form,
            part_of_speech=data.get("part_of_speech") or "",
            streak=int(data.get("streak") or 0),
            last_seen=parse_date(data.get("last_seen")),
            weight=float(data.get("weight", settings.learning.default_weight)),
            total_attempts=int(data.get("total_attempts") or 0),
            total_correct=int(data.get("total_correct") or 0),
            is_graduated=bool(data.get("is_graduated", False)),
        )


def validate_record(record: WordRecord) -> WordRecord:
    """Check the data model invariants and raise InvalidRecordError if broken."""
    if not record.lemma or not record.lemma.strip():
        raise InvalidRecordError("Lemma cannot be empty", record.lemma)
    if not record.answer_form:
        raise InvalidRecordError(f"Answer form for '{record.lemma}' cannot be empty", record.lemma)
    if record.answer_form.lower() not in record.sentence.lower():
        raise InvalidRecordError(
            f"Answer form '{record.answer_form}' not found in sentence '{record.sentence}'",
            record.lemma,
        )
    if record.streak < 0 or record.total_attempts < 0 or record.total_correct < 0:
        raise InvalidRecordError(f"Counters for '{record.lemma}' cannot be negative", record.lemma)
    if record.total_correct > record.total_attempts:
        raise InvalidRecordError(
            f"'{record.lemma}' has more correct answers than attempts", record.lemma
        )
    return record
