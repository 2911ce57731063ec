"""Test configuration."""
import os
import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest
from dotenv import load_dotenv

# Set test environment before any imports
os.environ["ENV"] = "test"
os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="lemot-test-"))
os.environ.pop("OPENAI_API_KEY", None)

# Load test environment variables
test_env_path = Path(__file__).parent.parent.parent.parent / ".env.test"
load_dotenv(test_env_path)

# Import after environment setup
from faker import Faker
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from lemot.config import ensure_directories
from lemot.models.base import init_db
from lemot.models.word import WordRecord, make_cloze, new_id

fake = Faker()


@pytest.fixture(autouse=True)
def setup_test_environment():
    """Set up test environment before each test."""
    ensure_directories()
    yield


@pytest.fixture
def session_factory() -> sessionmaker:
    """Create a session factory bound to a fresh in-memory database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory: sessionmaker) -> Generator[Session, None, None]:
    """Create a fresh database session for each test."""
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def make_word() -> Callable[..., WordRecord]:
    """Factory for word records with realistic content."""
    def _make_word(**overrides) -> WordRecord:
        lemma = overrides.pop("lemma", None) or f"{fake.word()}{new_id()[:8]}"
        answer_form = overrides.pop("answer_form", lemma)
        sentence = overrides.pop("sentence", f"Il faut {answer_form} maintenant.")
        values = dict(
            id=new_id(),
            lemma=lemma,
            meaning=fake.word(),
            sentence=sentence,
            cloze_sentence=make_cloze(sentence, answer_form),
            answer_form=answer_form,
            part_of_speech="v.",
        )
        values.update(overrides)
        return WordRecord(**values)

    return _make_word
