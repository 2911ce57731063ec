"""Reading word lists and saved progress."""
import json
import logging
import re
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import List, Optional, Sequence, Union

import mammoth

from lemot.errors import ImportFormatError
from lemot.models.word import WordRecord, today

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawEntry:
    """One line of a raw word list."""
    lemma: str
    meaning: str = ""
    sentence: str = ""


def parse_raw_input(text: str) -> List[RawEntry]:
    """Parse ``lemma # meaning # sentence`` lines, skipping blank ones.

    A tab also separates parts, as in lists typed into a word processor
    or copied from a spreadsheet.
    """
    entries = []
    for line in text.splitlines():
        if not line.strip():
            continue
        parts = [part.strip() for part in re.split(r"[#\t]", line)]
        if not parts[0]:
            logger.warning(f"Skipping line without a word: {line!r}")
            continue
        entries.append(
            RawEntry(
                lemma=parts[0],
                meaning=parts[1] if len(parts) > 1 else "",
                sentence=parts[2] if len(parts) > 2 else "",
            )
        )
    return entries


def extract_docx_text(path: Union[str, Path]) -> str:
    """Extract the raw paragraph text of a .docx document."""
    with open(path, "rb") as docx_file:
        try:
            result = mammoth.extract_raw_text(docx_file)
        except Exception as e:
            raise ImportFormatError(f"Could not read .docx file {path}: {e}") from e

    for message in result.messages:
        logger.warning(f"{path}: {message}")
    # Paragraphs come out separated by blank lines
    text = "\n".join(line for line in result.value.splitlines() if line.strip())
    logger.info(f"Extracted {len(text.splitlines())} lines from {path}")
    return text


def load_progress(text: str) -> List[WordRecord]:
    """Load saved progress from a JSON array of word records."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ImportFormatError("Invalid history JSON format") from e

    if not isinstance(data, list):
        raise ImportFormatError("History JSON must be an array")

    records = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise ImportFormatError(f"Entry {index} is not an object")
        try:
            records.append(WordRecord.from_dict(item))
        except (TypeError, ValueError) as e:
            raise ImportFormatError(f"Entry {index} could not be read: {e}") from e
    logger.info(f"Loaded {len(records)} words from saved progress")
    return records


def dump_progress(records: Sequence[WordRecord]) -> str:
    """Serialize the collection as a pretty-printed JSON array."""
    return json.dumps([record.to_dict() for record in records], ensure_ascii=False, indent=2)


def export_filename(day: Optional[date] = None) -> str:
    """Default file name for a progress export."""
    return f"french_vocab_progress_{(day or today()).isoformat()}.json"


def read_source(path: Union[str, Path]) -> str:
    """Read a word list source file as text."""
    path = Path(path)
    if path.suffix.lower() == ".docx":
        return extract_docx_text(path)
    return path.read_text(encoding="utf-8")


def is_progress_file(path: Union[str, Path]) -> bool:
    """Check whether a path looks like a saved progress export."""
    return Path(path).suffix.lower() == ".json"
