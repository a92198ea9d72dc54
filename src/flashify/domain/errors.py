"""Exception hierarchy for Flashify."""


class FlashifyError(Exception):
    """Base class for all Flashify errors."""


class InvalidDifficulty(FlashifyError, ValueError):
    """A rating outside easy/medium/hard was supplied."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Invalid difficulty {value!r}; expected easy, medium or hard")


class CardNotFound(FlashifyError, LookupError):
    """No flashcard with the given id exists."""

    def __init__(self, card_id: str):
        self.card_id = card_id
        super().__init__(f"Flashcard not found: {card_id}")


class DeckNotFound(FlashifyError, LookupError):
    """No deck with the given id exists."""

    def __init__(self, deck_id: str):
        self.deck_id = deck_id
        super().__init__(f"Deck not found: {deck_id}")


class ValidationError(FlashifyError, ValueError):
    """User input failed validation before anything was stored."""


class DeckValidationError(ValidationError):
    pass


class NoFlashcardsError(ValidationError):
    def __init__(self, message: str = "Please add at least one flashcard with both question and answer."):
        super().__init__(message)


class FlashcardValidationError(ValidationError):
    pass


class StorageError(FlashifyError):
    """A persisted document could not be read or decoded."""


class GenerationError(FlashifyError):
    """The flashcard generator failed or returned nothing usable."""


class GenerationInputError(GenerationError, ValidationError):
    pass


class GenerationParseError(GenerationError):
    """The generator's output could not be parsed into question/answer pairs."""
