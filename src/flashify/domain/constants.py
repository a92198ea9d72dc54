"""Centralized constants for the Flashify application.

All magic numbers and storage keys live here so every layer
imports from a single source of truth.
"""

from datetime import timedelta

# ---------- Review intervals ----------
EASY_INTERVAL = timedelta(days=3)
MEDIUM_INTERVAL = timedelta(days=1)
HARD_INTERVAL = timedelta(hours=4)

# ---------- Persistence keys ----------
DECKS_STORAGE_KEY = "Flashify.ai_decks"
FLASHCARDS_STORAGE_KEY = "Flashify.ai_flashcards"
STATS_STORAGE_KEY = "Flashify.ai_stats"

# ---------- Generation ----------
CARDS_PER_GENERATION = 10
TOPIC_MODEL = "gemini-2.0-flash-lite"
TEXT_MODEL = "gemini-1.5-flash"

# ---------- Mastery ----------
EASY_WEIGHT = 1.0
MEDIUM_WEIGHT = 0.5
MASTERY_LEVELS = [(80, "Master"), (60, "Advanced"), (40, "Intermediate")]
DEFAULT_MASTERY_LEVEL = "Beginner"

# ---------- Charts ----------
DEFAULT_CHART_DAYS = 7
HEATMAP_RANGES = {"week": 7, "month": 30, "year": 90}  # year view shows 3 months
HEATMAP_BUCKETS = [
    (0, "No activity"),
    (5, "1-5 cards"),
    (15, "6-15 cards"),
    (30, "16-30 cards"),
]
HEATMAP_TOP_LABEL = "30+ cards"

# ---------- IDs ----------
DECK_ID_PREFIX = "deck"
CARD_ID_PREFIX = "card"
