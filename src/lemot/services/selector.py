"""Session word selection."""
import logging
import math
import random
from datetime import date
from typing import Iterable, List, Optional, Sequence

from lemot.config import settings
from lemot.errors import InvalidArgumentError
from lemot.models.word import WordRecord, days_since, today as current_date

logger = logging.getLogger(__name__)


def _shuffled(words: Sequence[WordRecord], rng: random.Random) -> List[WordRecord]:
    words = list(words)
    rng.shuffle(words)
    return words


def select_session(
    collection: Sequence[WordRecord],
    desired_count: int,
    rng: Optional[random.Random] = None,
    today: Optional[date] = None,
) -> List[WordRecord]:
    """Choose up to desired_count words for a practice session.

    Graduated words are never chosen. Words already seen today are only used
    when there are not enough others. A larger pool is split into cold words
    (unseen for more than ``cold_after_days``), ranked by weight, and recently
    reviewed words, sampled at random. The cold/review ratio is best effort:
    a short bucket is backfilled from the rest of the pool.
    """
    if desired_count <= 0:
        raise InvalidArgumentError(f"desired_count must be positive, got {desired_count}")

    rng = rng or random.Random()
    today = today or current_date()

    # 1. Eligibility
    active = [word for word in collection if not word.is_graduated]

    # 2. Avoid words seen today unless we run short
    pool = [word for word in active if word.last_seen != today]
    if len(pool) < desired_count:
        pool = active

    # 3. Small pool: take everything
    if len(pool) <= desired_count:
        logger.debug(f"Pool of {len(pool)} words fits in a session of {desired_count}")
        return _shuffled(pool, rng)

    # 4. Split by recency
    cold_after = settings.learning.cold_after_days
    cold = [word for word in pool if days_since(word.last_seen, today) > cold_after]
    review = [word for word in pool if days_since(word.last_seen, today) <= cold_after]

    # 5. Targets
    cold_target = math.ceil(desired_count * settings.learning.cold_ratio)
    review_target = desired_count - cold_target

    # 6. Hardest and newest cold words first, stable for equal weights
    selected = sorted(cold, key=lambda word: word.weight, reverse=True)[:cold_target]

    # 7. Random review words
    selected.extend(rng.sample(review, min(len(review), review_target)))

    # 8. Backfill
    if len(selected) < desired_count:
        selected_ids = {word.id for word in selected}
        remaining = [word for word in pool if word.id not in selected_ids]
        needed = desired_count - len(selected)
        selected.extend(_shuffled(remaining, rng)[:needed])

    logger.info(
        f"Selected {len(selected)} words from {len(cold)} cold and {len(review)} review candidates"
    )

    # 9. Hide the split from callers
    return _shuffled(selected, rng)


def custom_session(
    collection: Sequence[WordRecord],
    ids: Iterable[str],
    rng: Optional[random.Random] = None,
) -> List[WordRecord]:
    """Build a session from words picked by the user, in collection order."""
    wanted = set(ids)
    words = [word for word in collection if word.id in wanted]
    if rng is not None:
        rng.shuffle(words)
    return words
