"""Reconcile saved word collections with newly imported drafts."""
import logging
from collections import OrderedDict
from typing import List, Sequence

from lemot.models.word import DraftWord, WordRecord, validate_record

logger = logging.getLogger(__name__)


def lemma_key(lemma: str) -> str:
    """Deduplication key for a lemma."""
    return lemma.lower()


def merge(existing: Sequence[WordRecord], drafts: Sequence[DraftWord]) -> List[WordRecord]:
    """Merge drafts into an existing collection, keyed by lowercase lemma.

    Existing records always win: a draft whose lemma is already present is
    discarded, so learning history is never overwritten. A lemma repeated in
    the existing records keeps its first position and its last record. Within
    the drafts only the first occurrence of a lemma is kept. New records start
    with the default learning state and are validated once here.
    """
    merged: "OrderedDict[str, WordRecord]" = OrderedDict()
    for record in existing:
        merged[lemma_key(record.lemma)] = record

    added = 0
    for draft in drafts:
        key = lemma_key(draft.lemma)
        if key in merged:
            logger.debug(f"Skipping draft '{draft.lemma}': lemma already in collection")
            continue
        merged[key] = validate_record(WordRecord.from_draft(draft))
        added += 1

    logger.info(f"Merged {len(existing)} existing and {len(drafts)} imported words, {added} added")
    return list(merged.values())
