"""
Gemini Flashcard Generator: Infrastructure adapter for Google Gemini.

Implements FlashcardGenerator with the google-generativeai client.
"""

import logging

import google.generativeai as genai

from flashify.domain.constants import TOPIC_MODEL
from flashify.domain.errors import GenerationError
from flashify.domain.ports import FlashcardGenerator

logger = logging.getLogger(__name__)


class GeminiFlashcardGenerator(FlashcardGenerator):
    """Adapter for Gemini text completion."""

    def __init__(self, api_key: str | None, default_model: str = TOPIC_MODEL):
        self.api_key = api_key
        self.default_model = default_model
        self._configured = False

    def _ensure_configured(self) -> None:
        if self._configured:
            return
        if not self.api_key:
            raise GenerationError("No Gemini API key configured (set GEMINI_API_KEY)")
        genai.configure(api_key=self.api_key)
        self._configured = True

    async def generate(self, prompt: str, *, model: str | None = None) -> str:
        self._ensure_configured()
        model_name = model or self.default_model
        logger.debug(f"Requesting completion from {model_name} ({len(prompt)} chars)")

        client = genai.GenerativeModel(model_name)
        response = await client.generate_content_async(prompt)

        text = getattr(response, "text", None)
        if not text:
            raise GenerationError(f"Empty response from {model_name}")
        return text
