"""
Ports (interfaces) for deck/card storage and flashcard generation.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod

from .models import Deck, Flashcard


class KeyValueStore(ABC):
    """
    Port for the raw persistence transport: one text document per key.

    Implementations:
        - InMemoryKeyValueStore: process-local dict, used in tests and "memory" mode.
        - FileKeyValueStore: one JSON file per key inside a data directory.
    """

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored document, or None if the key was never written."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Replace the stored document for key."""
        pass


class DeckRepository(ABC):
    """Port for deck metadata."""

    @abstractmethod
    def all(self) -> list[Deck]:
        pass

    @abstractmethod
    def get(self, deck_id: str) -> Deck | None:
        pass

    @abstractmethod
    def upsert(self, deck: Deck) -> None:
        """Insert the deck, or replace the stored deck with the same id in place."""
        pass

    @abstractmethod
    def delete(self, deck_id: str) -> bool:
        """Remove the deck. Returns False if it did not exist."""
        pass


class CardRepository(ABC):
    """Port for flashcards. Listing keeps insertion (store) order."""

    @abstractmethod
    def all(self) -> list[Flashcard]:
        pass

    @abstractmethod
    def get(self, card_id: str) -> Flashcard | None:
        pass

    @abstractmethod
    def for_deck(self, deck_id: str) -> list[Flashcard]:
        pass

    @abstractmethod
    def upsert_many(self, cards: list[Flashcard]) -> list[str]:
        """
        Upsert each card by id.

        Returns:
            Ids of the cards that were not in the store before this call.
        """
        pass

    @abstractmethod
    def delete_for_deck(self, deck_id: str) -> int:
        """Remove every card owned by deck_id. Returns the number removed."""
        pass


class FlashcardGenerator(ABC):
    """
    Port for the external text-completion service.

    Implementations:
        - GeminiFlashcardGenerator: Google Gemini via google-generativeai.
    """

    @abstractmethod
    async def generate(self, prompt: str, *, model: str | None = None) -> str:
        """
        Run the prompt and return the raw completion text.

        Args:
            prompt: Fully rendered prompt.
            model: Optional model override.
        """
        pass
