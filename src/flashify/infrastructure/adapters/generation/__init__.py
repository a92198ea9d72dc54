# Infrastructure Generation Adapters Package
from .gemini import GeminiFlashcardGenerator

__all__ = ["GeminiFlashcardGenerator"]
