"""Tests for word service."""
from dataclasses import replace
from datetime import date

import pytest
from sqlalchemy.orm import Session

from lemot.errors import InvalidRecordError
from lemot.services.word_service import WordService


@pytest.fixture
def word_service(db: Session) -> WordService:
    """Create a word service instance."""
    return WordService(db)


def test_save_and_load_collection_keeps_order(word_service: WordService, make_word) -> None:
    """Test the stored collection keeps its order and fields."""
    words = [make_word(last_seen=date(2024, 1, i + 1), streak=i) for i in range(5)]
    word_service.save_collection(words)

    assert word_service.load_collection() == words
    assert word_service.get_word_count() == 5


def test_save_collection_replaces_previous(word_service: WordService, make_word) -> None:
    """Test saving again reorders and drops missing words."""
    a, b, c = make_word(), make_word(), make_word()
    word_service.save_collection([a, b, c])
    word_service.save_collection([c, a])

    assert [w.id for w in word_service.load_collection()] == [c.id, a.id]


def test_save_word_appends_and_updates(word_service: WordService, make_word) -> None:
    """Test storing single words."""
    a, b = make_word(), make_word()
    word_service.save_collection([a])
    word_service.save_word(b)
    updated = word_service.save_word(replace(b, streak=3))

    loaded = word_service.load_collection()
    assert [w.id for w in loaded] == [a.id, b.id]
    assert loaded[1].streak == 3
    assert updated.streak == 3


def test_get_word_and_lemma_lookup(word_service: WordService, make_word) -> None:
    """Test getting a word by id or lemma."""
    word = make_word(lemma="Manger")
    word_service.save_collection([word])

    assert word_service.get_word(word.id) == word
    assert word_service.get_word_by_lemma("manger") == word
    assert word_service.get_word("missing") is None


def test_reset_word(word_service: WordService, make_word) -> None:
    """Test resetting one word."""
    word = make_word(streak=5, is_graduated=True, total_attempts=5, total_correct=5, weight=0.9)
    word_service.save_collection([word])

    reset = word_service.reset_word(word.id)
    assert reset.streak == 0
    assert reset.is_graduated is False
    assert word_service.get_word(word.id).weight == 0.5
    assert word_service.reset_word("missing") is None


def test_reset_all(word_service: WordService, make_word) -> None:
    """Test resetting every word."""
    words = [make_word(streak=2, total_attempts=3, total_correct=2) for _ in range(3)]
    word_service.save_collection(words)
    word_service.reset_all()

    assert all(w.streak == 0 and w.total_attempts == 0 for w in word_service.load_collection())


def test_update_word(word_service: WordService, make_word) -> None:
    """Test editing content through the service."""
    word = make_word(lemma="venir", streak=2, total_attempts=2, total_correct=2)
    word_service.save_collection([word])

    updated = word_service.update_word(word.id, meaning="to come")
    assert updated.meaning == "to come"
    assert updated.streak == 2
    assert word_service.get_word(word.id).meaning == "to come"

    with pytest.raises(InvalidRecordError):
        word_service.update_word(word.id, sentence="Rien à voir.")
    assert word_service.update_word("missing", meaning="x") is None


def test_search_words(word_service: WordService, make_word) -> None:
    """Test searching by lemma or meaning, most practiced first."""
    chat = make_word(lemma="chat", meaning="cat", streak=1, total_attempts=1, total_correct=1)
    chien = make_word(lemma="chien", meaning="dog", streak=3, total_attempts=3, total_correct=3)
    maison = make_word(lemma="maison", meaning="house")
    word_service.save_collection([chat, chien, maison])

    assert [w.lemma for w in word_service.search_words("CH")] == ["chien", "chat"]
    assert [w.lemma for w in word_service.search_words("house")] == ["maison"]
    assert len(word_service.search_words("")) == 3


def test_get_stats(word_service: WordService, make_word) -> None:
    """Test collection totals."""
    word_service.save_collection([
        make_word(),
        make_word(total_attempts=2, total_correct=1, streak=1),
        make_word(total_attempts=5, total_correct=5, streak=5, is_graduated=True),
    ])
    assert word_service.get_stats() == {"total": 3, "started": 2, "graduated": 1}
