"""
Service Factory
Centralizes wiring of storage adapters and generators from configuration.
"""

import logging

from flashify.application.config import AppConfig
from flashify.application.flashcard_service import FlashcardService
from flashify.application.generation import GenerationService
from flashify.domain.ports import KeyValueStore
from flashify.infrastructure.adapters.generation import GeminiFlashcardGenerator
from flashify.infrastructure.adapters.storage import (
    FileKeyValueStore,
    InMemoryKeyValueStore,
    JsonCardRepository,
    JsonDeckRepository,
    JsonStatsRepository,
)

logger = logging.getLogger(__name__)


def get_key_value_store(config: AppConfig) -> KeyValueStore:
    """
    Returns the KeyValueStore selected by config.storage_backend.
    """
    if config.storage_backend == "memory":
        logger.info("Storage: in-memory (data is not persisted)")
        return InMemoryKeyValueStore()

    logger.info(f"Storage: {config.data_dir}")
    return FileKeyValueStore(config.data_dir)


def build_flashcard_service(
    config: AppConfig, store: KeyValueStore | None = None
) -> FlashcardService:
    """Build the one FlashcardService for this process."""
    store = store or get_key_value_store(config)
    return FlashcardService(
        decks=JsonDeckRepository(store),
        cards=JsonCardRepository(store),
        stats=JsonStatsRepository(store),
    )


def build_generation_service(config: AppConfig) -> GenerationService:
    return GenerationService(
        GeminiFlashcardGenerator(api_key=config.gemini_api_key, default_model=config.topic_model),
        count=config.cards_per_generation,
        topic_model=config.topic_model,
        text_model=config.text_model,
    )
