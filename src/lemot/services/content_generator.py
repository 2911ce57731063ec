"""Content generation service for imported words and quiz distractors."""
import json
import logging
from typing import Any, Dict, List, Optional, Sequence

from deep_translator import GoogleTranslator
from openai import OpenAI

from lemot.config import settings
from lemot.models.word import DraftWord, make_cloze, new_id
from lemot.services.importer import RawEntry

logger = logging.getLogger(__name__)

ENRICH_PROMPT = """You are a French teacher helper. I will give you a list of words.

For each item:
1. If 'meaning' is missing, generate a concise meaning in {native}.
2. Identify the part of speech using abbreviations like "v.", "n.m.", "n.f.", "adj.".
3. If 'sentence' is missing, generate a short example sentence in {target}.
4. Identify the EXACT string used for the word in the sentence (e.g. 'suis' for 'être'). This is 'answer_form'.
5. Create 'cloze_sentence' by replacing that exact string with "{blank}".

Input data:
{data}

Return a JSON object {{"words": [...]}} where each item has the keys
word, part_of_speech, answer_form, meaning, sentence, cloze_sentence."""

DISTRACTOR_PROMPT = """The target answer is: "{answer}".

Generate {count} {target} distractors (incorrect options) that are grammatically similar to the target.
If the target is a conjugated verb, use the same person and tense. If it is an infinitive, use infinitives.
If it is a noun, match gender and number. Do not include "{answer}" or any of: {existing}.

Return a JSON object {{"distractors": [...]}} with exactly {count} strings."""


class ContentGenerator:
    """Service for generating meanings, example sentences and distractors."""

    def __init__(self, client: Optional[OpenAI] = None):
        if client is None and settings.generator.api_key:
            client = OpenAI(api_key=settings.generator.api_key, timeout=settings.generator.timeout)
        self.client = client
        if self.client is None:
            logger.info("ContentGenerator initialized without a text generation client")

    @staticmethod
    def generate_translation(text: str, source_lang: str, target_lang: str) -> str:
        """Generate a translation for a word."""
        try:
            translator = GoogleTranslator(source=source_lang, target=target_lang)
            translation = translator.translate(text)
            logger.info(f"Translation generated for word: {text}, translation: {translation}")
            return translation or ""
        except Exception as e:
            logger.error(f"Error generating translation for word: {text}, error: {e}")
            return ""

    def _complete_json(self, prompt: str) -> Dict[str, Any]:
        response = self.client.chat.completions.create(
            model=settings.generator.model,
            messages=[{"role": "user", "content": prompt}],
            response_format={"type": "json_object"},
        )
        content = response.choices[0].message.content
        if not content:
            raise ValueError("Empty response from text generation service")
        return json.loads(content)

    def fallback_draft(self, entry: RawEntry) -> DraftWord:
        """Build a draft without the text generation service."""
        meaning = entry.meaning
        if not meaning:
            meaning = self.generate_translation(
                entry.lemma,
                settings.content.target_language,
                settings.content.native_language,
            ) or settings.content.unknown_label
        sentence = entry.sentence or entry.lemma
        if entry.lemma.lower() not in sentence.lower():
            # Without the generator the inflected form in the sentence is unknown
            logger.warning(
                f"Sentence '{sentence}' does not contain '{entry.lemma}', using the word itself"
            )
            sentence = entry.lemma
        return DraftWord(
            id=new_id(),
            lemma=entry.lemma,
            meaning=meaning,
            sentence=sentence,
            cloze_sentence=make_cloze(sentence, entry.lemma),
            part_of_speech="",
            answer_form=entry.lemma,
        )

    def _draft_from_item(self, item: Dict[str, Any], entry: RawEntry) -> DraftWord:
        sentence = item.get("sentence") or entry.sentence or entry.lemma
        answer_form = item.get("answer_form") or entry.lemma
        if answer_form.lower() not in sentence.lower():
            logger.warning(f"Generated answer form '{answer_form}' not in sentence for '{entry.lemma}'")
            return self.fallback_draft(entry)
        return DraftWord(
            id=new_id(),
            lemma=entry.lemma,
            meaning=item.get("meaning") or entry.meaning or settings.content.unknown_label,
            sentence=sentence,
            cloze_sentence=item.get("cloze_sentence") or make_cloze(sentence, answer_form),
            part_of_speech=item.get("part_of_speech") or "",
            answer_form=answer_form,
        )

    def enrich(self, entries: Sequence[RawEntry]) -> List[DraftWord]:
        """Turn raw entries into drafts with meaning, sentence and cloze filled in."""
        if not entries:
            return []
        if self.client is None:
            return [self.fallback_draft(entry) for entry in entries]

        data = json.dumps(
            [{"word": e.lemma, "meaning": e.meaning, "sentence": e.sentence} for e in entries],
            ensure_ascii=False,
        )
        prompt = ENRICH_PROMPT.format(
            native=settings.content.native_language,
            target=settings.content.target_language,
            blank=settings.content.blank_marker,
            data=data,
        )
        try:
            items = self._complete_json(prompt).get("words")
            if not isinstance(items, list) or len(items) != len(entries):
                raise ValueError("Unexpected number of generated words")
            drafts = [self._draft_from_item(item, entry) for item, entry in zip(items, entries)]
            logger.info(f"Generated content for {len(drafts)} words")
            return drafts
        except Exception as e:
            logger.error(f"Error generating content for {len(entries)} words, error: {e}")
            return [self.fallback_draft(entry) for entry in entries]

    def generate_distractors(self, answer: str, existing: Sequence[str] = ()) -> List[str]:
        """Generate wrong answer options for a quiz question."""
        count = settings.content.distractor_count
        fallback = list(settings.content.fallback_distractors)[:count]
        if self.client is None:
            return fallback

        prompt = DISTRACTOR_PROMPT.format(
            answer=answer,
            count=count,
            target=settings.content.target_language,
            existing=", ".join(existing) or "-",
        )
        try:
            distractors = self._complete_json(prompt).get("distractors")
            if not isinstance(distractors, list):
                raise ValueError("Distractors must be a list")
            distractors = [str(d) for d in distractors if str(d) and str(d) != answer]
            if len(distractors) < count:
                raise ValueError(f"Expected {count} distractors, got {len(distractors)}")
            logger.debug(f"Distractors generated for {answer}: {distractors}")
            return distractors[:count]
        except Exception as e:
            logger.error(f"Error generating distractors for: {answer}, error: {e}")
            return fallback
