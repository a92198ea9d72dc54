"""
Flashcard generation: prompt rendering and strict parsing of model output.

The generator port returns free text; this module turns it into unassigned
Flashcards or fails with GenerationParseError. There is no partial or
best-effort recovery: one malformed item rejects the whole response.
"""

import json
import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Literal

from flashify.application.id_service import new_flashcard
from flashify.application.utils.time import as_utc, utc_now
from flashify.domain.constants import CARDS_PER_GENERATION, TEXT_MODEL, TOPIC_MODEL
from flashify.domain.errors import GenerationError, GenerationInputError, GenerationParseError
from flashify.domain.models import Flashcard
from flashify.domain.ports import FlashcardGenerator

logger = logging.getLogger(__name__)

GenerationMode = Literal["topic", "text"]

_JSON_ARRAY = re.compile(r"\[[\s\S]*\]")

_FORMAT_INSTRUCTIONS = """
Format your response as a JSON array with objects containing 'question' and 'answer' fields.
Example format:
[
  {{
    "question": "What is photosynthesis?",
    "answer": "Photosynthesis is the process by which green plants and some other organisms use sunlight to synthesize foods with carbon dioxide and water, generating oxygen as a byproduct."
  }}
]
Make sure the response is valid JSON and contains exactly {count} flashcards."""

TOPIC_PROMPT = (
    "Generate {count} concise flashcards with questions and answers for this topic: {topic}."
    + _FORMAT_INSTRUCTIONS
)

TEXT_PROMPT = (
    "Summarize this text into {count} flashcards with clear question-answer pairs:\n\n{text}\n"
    + _FORMAT_INSTRUCTIONS
)


@dataclass(frozen=True)
class QAPair:
    question: str
    answer: str


def build_prompt(mode: GenerationMode, value: str, count: int = CARDS_PER_GENERATION) -> str:
    if mode == "topic":
        return TOPIC_PROMPT.format(count=count, topic=value)
    if mode == "text":
        return TEXT_PROMPT.format(count=count, text=value)
    raise ValueError(f"Unknown generation mode: {mode!r}")


def parse_flashcard_pairs(text: str) -> list[QAPair]:
    """
    Extract question/answer pairs from a model response.

    The JSON array may be surrounded by prose or code fences. Every element
    must be an object with non-empty string 'question' and 'answer'.

    Raises:
        GenerationParseError: if no array is found, it is not valid JSON,
            it is empty, or any element is malformed.
    """
    match = _JSON_ARRAY.search(text or "")
    if not match:
        raise GenerationParseError("Failed to find a JSON array in the generator response")

    try:
        items = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise GenerationParseError(f"Generator response is not valid JSON: {e}") from e

    if not isinstance(items, list) or not items:
        raise GenerationParseError("Generator response contained no flashcards")

    pairs = []
    for i, item in enumerate(items):
        if not isinstance(item, dict):
            raise GenerationParseError(f"Item {i} is not an object")
        question = item.get("question")
        answer = item.get("answer")
        if not isinstance(question, str) or not question.strip():
            raise GenerationParseError(f"Item {i} has no question")
        if not isinstance(answer, str) or not answer.strip():
            raise GenerationParseError(f"Item {i} has no answer")
        pairs.append(QAPair(question=question.strip(), answer=answer.strip()))
    return pairs


def pairs_to_flashcards(pairs: list[QAPair], now: datetime | None = None) -> list[Flashcard]:
    """Wrap pairs as new, unassigned, immediately-due flashcards."""
    now = as_utc(now or utc_now())
    return [new_flashcard(p.question, p.answer, deck_id="", now=now) for p in pairs]


class GenerationService:
    """
    Turns a topic or a pasted text into flashcards via a FlashcardGenerator.

    The requested count is advisory: a response with fewer (or more) valid
    pairs is accepted and logged, not rejected.
    """

    def __init__(
        self,
        generator: FlashcardGenerator,
        count: int = CARDS_PER_GENERATION,
        topic_model: str = TOPIC_MODEL,
        text_model: str = TEXT_MODEL,
    ):
        self._generator = generator
        self._count = count
        self._models = {"topic": topic_model, "text": text_model}

    async def from_topic(self, topic: str, now: datetime | None = None) -> list[Flashcard]:
        return await self.generate("topic", topic, now=now)

    async def from_text(self, text: str, now: datetime | None = None) -> list[Flashcard]:
        return await self.generate("text", text, now=now)

    async def generate(
        self, mode: GenerationMode, value: str, now: datetime | None = None
    ) -> list[Flashcard]:
        value = (value or "").strip()
        if not value:
            raise GenerationInputError(f"Please enter a {mode} to generate flashcards.")

        prompt = build_prompt(mode, value, self._count)
        try:
            raw = await self._generator.generate(prompt, model=self._models[mode])
        except GenerationError:
            raise
        except Exception as e:
            logger.error(f"Flashcard generation failed: {e}")
            raise GenerationError("Failed to generate flashcards") from e

        pairs = parse_flashcard_pairs(raw)
        if len(pairs) != self._count:
            logger.warning(f"Generator returned {len(pairs)} flashcards, expected {self._count}")
        logger.info(f"Generated {len(pairs)} flashcards from {mode}")
        return pairs_to_flashcards(pairs, now=now)
