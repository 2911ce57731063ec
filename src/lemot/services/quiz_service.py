"""Answer options for quiz questions."""
import logging
import random
from typing import List, Optional, Sequence

from lemot.config import settings
from lemot.models.word import WordRecord
from lemot.services.content_generator import ContentGenerator

logger = logging.getLogger(__name__)


class QuizService:
    """Service for building and checking multiple choice questions."""

    def __init__(self, content_generator: ContentGenerator, rng: Optional[random.Random] = None):
        """Initialize the service with a content generator."""
        self.content_generator = content_generator
        self.rng = rng or random.Random()

    def get_distractors(self, target: WordRecord, collection: Sequence[WordRecord]) -> List[str]:
        """Choose wrong options, preferring lemmas already in the collection."""
        count = settings.content.distractor_count
        candidates = [word.lemma for word in collection if word.id != target.id]

        if len(candidates) >= count:
            return self.rng.sample(candidates, count)

        logger.info(f"Only {len(candidates)} other words available, asking for generated distractors")
        distractors = self.content_generator.generate_distractors(target.correct_text, candidates)
        if not distractors:
            distractors = list(settings.content.fallback_distractors)
        return distractors

    def build_options(self, target: WordRecord, collection: Sequence[WordRecord]) -> List[str]:
        """Build the shuffled answer options for a word."""
        options = [target.correct_text] + self.get_distractors(target, collection)
        self.rng.shuffle(options)
        return options

    @staticmethod
    def is_correct(target: WordRecord, option: str) -> bool:
        """Check whether the chosen option is the expected answer."""
        return option == target.correct_text
