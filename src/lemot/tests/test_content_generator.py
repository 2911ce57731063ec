"""Tests for content generation service."""
import json
from unittest.mock import MagicMock, patch

import pytest

from lemot.services.content_generator import ContentGenerator
from lemot.services.importer import RawEntry
from lemot.services.merger import merge


def completion(payload) -> MagicMock:
    """Build a fake chat completion response."""
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = json.dumps(payload, ensure_ascii=False)
    return response


@pytest.fixture
def client() -> MagicMock:
    """Create a fake text generation client."""
    return MagicMock()


def test_generate_translation_failure_returns_empty() -> None:
    """Test translation errors degrade to an empty string."""
    with patch("lemot.services.content_generator.GoogleTranslator") as translator:
        translator.return_value.translate.side_effect = RuntimeError("offline")
        assert ContentGenerator.generate_translation("chat", "fr", "en") == ""


def test_enrich_without_client_uses_fallback() -> None:
    """Test enrichment without a text generation service."""
    generator = ContentGenerator()
    assert generator.client is None

    with patch.object(ContentGenerator, "generate_translation", return_value="猫") as translate:
        drafts = generator.enrich([
            RawEntry(lemma="chat"),
            RawEntry(lemma="chien", meaning="dog", sentence="Le chien dort."),
        ])

    translate.assert_called_once_with("chat", "fr", "zh-CN")
    assert drafts[0].meaning == "猫"
    assert drafts[0].sentence == "chat"
    assert drafts[0].cloze_sentence == "___"
    assert drafts[1].meaning == "dog"
    assert drafts[1].cloze_sentence == "Le ___ dort."
    assert drafts[1].answer_form == "chien"
    assert all(d.id for d in drafts)


def test_fallback_uses_unknown_label_when_translation_fails() -> None:
    """Test the unknown label when no meaning can be produced."""
    with patch.object(ContentGenerator, "generate_translation", return_value=""):
        draft = ContentGenerator().fallback_draft(RawEntry(lemma="chat"))
    assert draft.meaning == "未知"


def test_fallback_keeps_inflected_entries_importable() -> None:
    """Test a sentence with only an inflected form still gives a valid record."""
    with patch.object(ContentGenerator, "generate_translation", return_value="manger"):
        drafts = ContentGenerator().enrich([
            RawEntry(lemma="être", meaning="to be", sentence="Je suis content."),
            RawEntry(lemma="manger"),
        ])

    assert drafts[0].sentence == "être"
    assert drafts[0].answer_form == "être"
    assert drafts[0].meaning == "to be"

    merged = merge([], drafts)
    assert [w.lemma for w in merged] == ["être", "manger"]


def test_enrich_with_client(client: MagicMock) -> None:
    """Test enrichment through the text generation service."""
    client.chat.completions.create.return_value = completion({"words": [{
        "word": "être",
        "part_of_speech": "v.",
        "answer_form": "suis",
        "meaning": "是",
        "sentence": "Je suis étudiant.",
        "cloze_sentence": "Je ___ étudiant.",
    }]})
    drafts = ContentGenerator(client=client).enrich([RawEntry(lemma="être")])

    assert len(drafts) == 1
    assert drafts[0].lemma == "être"
    assert drafts[0].answer_form == "suis"
    assert drafts[0].part_of_speech == "v."
    assert drafts[0].cloze_sentence == "Je ___ étudiant."
    client.chat.completions.create.assert_called_once()


def test_enrich_rejects_answer_form_outside_sentence(client: MagicMock) -> None:
    """Test a generated item that breaks the cloze invariant falls back."""
    client.chat.completions.create.return_value = completion({"words": [{
        "answer_form": "es",
        "sentence": "Je suis là.",
    }]})
    with patch.object(ContentGenerator, "generate_translation", return_value="to be"):
        drafts = ContentGenerator(client=client).enrich([RawEntry(lemma="être")])

    assert drafts[0].sentence == "être"
    assert drafts[0].answer_form == "être"


def test_enrich_service_failure_falls_back(client: MagicMock) -> None:
    """Test enrichment errors degrade to local drafts."""
    client.chat.completions.create.side_effect = RuntimeError("quota exceeded")
    entries = [RawEntry(lemma="aller", meaning="去"), RawEntry(lemma="voir", meaning="看")]
    drafts = ContentGenerator(client=client).enrich(entries)

    assert [d.lemma for d in drafts] == ["aller", "voir"]
    assert [d.meaning for d in drafts] == ["去", "看"]


def test_enrich_empty_input() -> None:
    """Test nothing to enrich."""
    assert ContentGenerator().enrich([]) == []


def test_generate_distractors_with_client(client: MagicMock) -> None:
    """Test distractors from the text generation service."""
    client.chat.completions.create.return_value = completion(
        {"distractors": ["vais", "suis", "fais", "dis"]}
    )
    distractors = ContentGenerator(client=client).generate_distractors("suis", ["être"])
    assert distractors == ["vais", "fais", "dis"]


@pytest.mark.parametrize("payload", [{"distractors": "vais"}, {"distractors": ["vais"]}, {}])
def test_generate_distractors_bad_response(client: MagicMock, payload) -> None:
    """Test unusable responses degrade to the fallback set."""
    client.chat.completions.create.return_value = completion(payload)
    assert ContentGenerator(client=client).generate_distractors("suis") == ["dire", "faire", "aller"]


def test_generate_distractors_without_client() -> None:
    """Test the fallback set without a service."""
    assert ContentGenerator().generate_distractors("suis") == ["dire", "faire", "aller"]
