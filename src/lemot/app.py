"""Command line application."""
import logging
import random
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

import typer
from sqlalchemy.orm import Session

from lemot.config import ensure_directories, settings
from lemot.errors import ImportFormatError, InvalidArgumentError, InvalidRecordError
from lemot.logging_config import setup_logging
from lemot.models.base import SessionLocal, init_db
from lemot.models.word import WordRecord
from lemot.monitoring import start_monitoring
from lemot.services.content_generator import ContentGenerator
from lemot.services.importer import (
    dump_progress,
    export_filename,
    is_progress_file,
    load_progress,
    parse_raw_input,
    read_source,
)
from lemot.services.learning_service import LearningService
from lemot.services.quiz_service import QuizService
from lemot.services.word_service import WordService

logger = logging.getLogger(__name__)

app = typer.Typer(help="Adaptive vocabulary trainer: import word lists and pick practice sessions.")


@contextmanager
def open_db() -> Iterator[Session]:
    """Open a database session on an initialized database."""
    init_db()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _fail(message: str) -> None:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code=1)


def _format_word(word: WordRecord) -> str:
    seen = word.last_seen.isoformat() if word.last_seen else "never"
    pos = f" ({word.part_of_speech})" if word.part_of_speech else ""
    return (
        f"{word.id}  {word.lemma}{pos} - {word.meaning}  "
        f"[streak {word.streak}, weight {word.weight:.2f}, seen {seen}]"
    )


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override LOG_LEVEL."),
    metrics_port: Optional[int] = typer.Option(None, "--metrics-port", help="Expose Prometheus metrics."),
) -> None:
    """Set up logging, data directories and optional metrics."""
    ensure_directories()
    setup_logging(level=log_level)
    if metrics_port:
        start_monitoring(metrics_port)


@app.command("import")
def import_words(
    sources: List[Path] = typer.Argument(..., exists=True, dir_okay=False, help="Word lists (.txt, .docx) or saved progress (.json)."),
) -> None:
    """Import word lists and saved progress into the collection."""
    history: List[WordRecord] = []
    raw_text = []
    for source in sources:
        try:
            if is_progress_file(source):
                history.extend(load_progress(source.read_text(encoding="utf-8")))
            else:
                raw_text.append(read_source(source))
        except ImportFormatError as e:
            _fail(f"{source}: {e}")

    entries = parse_raw_input("\n".join(raw_text))
    if not history and not entries:
        _fail("Please provide at least one word or saved word record")
    drafts = ContentGenerator().enrich(entries)

    with open_db() as db:
        service = LearningService(db)
        before = service.word_service.get_word_count()
        try:
            collection = service.import_words(drafts, history=history)
        except InvalidRecordError as e:
            _fail(str(e))
    typer.echo(f"Imported {len(collection) - before} new words ({len(collection)} total).")


@app.command("export")
def export_words(
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Target JSON file."),
) -> None:
    """Export the collection with its learning progress as JSON."""
    output = output or settings.paths.exports_dir / export_filename()
    with open_db() as db:
        records = WordService(db).load_collection()
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(dump_progress(records), encoding="utf-8")
    typer.echo(f"Exported {len(records)} words to {output}")


@app.command("stats")
def show_stats() -> None:
    """Show collection totals."""
    with open_db() as db:
        stats = WordService(db).get_stats()
    typer.echo(f"Total: {stats['total']}  Started: {stats['started']}  Mastered: {stats['graduated']}")


@app.command("session")
def preview_session(
    count: int = typer.Option(settings.learning.default_session_size, "--count", "-n", help="Number of words."),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for a reproducible selection."),
    word_ids: Optional[List[str]] = typer.Option(None, "--word", "-w", help="Practice these word IDs instead."),
    show_options: bool = typer.Option(False, "--options", help="Show the cloze question and answer options."),
) -> None:
    """Show the words the next session would practice."""
    rng = random.Random(seed) if seed is not None else None
    with open_db() as db:
        service = LearningService(db, rng=rng)
        try:
            if word_ids:
                session = service.start_custom_session(word_ids)
            else:
                session = service.start_session(count)
        except InvalidArgumentError as e:
            _fail(str(e))
        collection = service.word_service.load_collection() if show_options else []
    if not session:
        typer.echo("No words to practice.")
        return

    quiz = QuizService(ContentGenerator(), rng=rng) if show_options else None
    for word in session:
        typer.echo(_format_word(word))
        if quiz is not None:
            typer.echo(f"    {word.cloze_sentence}")
            typer.echo(f"    options: {' / '.join(quiz.build_options(word, collection))}")


@app.command("search")
def search(query: str = typer.Argument("", help="Text to look for in lemmas and meanings.")) -> None:
    """List words matching a query, most practiced first."""
    with open_db() as db:
        words = WordService(db).search_words(query)
    for word in words:
        typer.echo(_format_word(word))


@app.command("reset")
def reset(
    word_id: Optional[str] = typer.Argument(None, help="ID of the word to reset."),
    all_words: bool = typer.Option(False, "--all", help="Reset every word."),
) -> None:
    """Reset learning progress for one word or the whole collection."""
    if not word_id and not all_words:
        _fail("Give a word ID or --all")
    with open_db() as db:
        service = WordService(db)
        if all_words:
            records = service.reset_all()
            typer.echo(f"Reset {len(records)} words.")
            return
        record = service.reset_word(word_id)
    if record is None:
        _fail(f"Word {word_id} not found")
    typer.echo(f"Reset '{record.lemma}'.")
