"""Learning state transitions for single word records."""
import logging
from dataclasses import replace
from datetime import date
from typing import Optional

from lemot.config import settings
from lemot.errors import InvalidRecordError
from lemot.models.word import WordRecord, make_cloze, today as current_date, validate_record

logger = logging.getLogger(__name__)

CONTENT_FIELDS = frozenset(
    {"lemma", "meaning", "sentence", "cloze_sentence", "answer_form", "part_of_speech"}
)


def record_answer(word: WordRecord, was_correct: bool, today: Optional[date] = None) -> WordRecord:
    """Return the word updated with the outcome of one attempt.

    A correct answer extends the streak and graduates the word once the
    streak reaches the threshold. A miss resets the streak to 1 and raises
    the weight. Graduation is never undone here and weight never decreases.
    """
    streak = word.streak
    weight = word.weight
    is_graduated = word.is_graduated
    total_correct = word.total_correct

    if was_correct:
        streak += 1
        total_correct += 1
        if streak >= settings.learning.graduation_threshold:
            is_graduated = True
    else:
        # A miss still counts as one recent touch
        streak = 1
        weight = round(weight + settings.learning.weight_increment, 2)

    updated = replace(
        word,
        streak=streak,
        weight=weight,
        is_graduated=is_graduated,
        total_attempts=word.total_attempts + 1,
        total_correct=total_correct,
        last_seen=today or current_date(),
    )
    if is_graduated and not word.is_graduated:
        logger.info(f"Word '{word.lemma}' graduated after {updated.total_attempts} attempts")
    return updated


def reset_progress(word: WordRecord) -> WordRecord:
    """Return the word with its learning state back at the defaults."""
    return replace(
        word,
        streak=0,
        weight=settings.learning.default_weight,
        total_attempts=0,
        total_correct=0,
        is_graduated=False,
        last_seen=None,
    )


def edit_word(word: WordRecord, **changes) -> WordRecord:
    """Return the word with edited content fields.

    The cloze sentence is rebuilt when the sentence or answer form changes
    and no explicit cloze sentence is given.
    """
    unknown = set(changes) - CONTENT_FIELDS
    if unknown:
        raise InvalidRecordError(
            f"Cannot edit fields {sorted(unknown)} of '{word.lemma}'", word.lemma
        )

    updated = replace(word, **changes)
    if not updated.answer_form:
        updated = replace(updated, answer_form=updated.lemma)
    if "cloze_sentence" not in changes and (
        updated.sentence != word.sentence or updated.answer_form != word.answer_form
    ):
        updated = replace(updated, cloze_sentence=make_cloze(updated.sentence, updated.answer_form))
    return validate_record(updated)
