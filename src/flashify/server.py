import logging
import threading
import time
from contextlib import asynccontextmanager
from datetime import date, datetime
from functools import lru_cache
from typing import Literal

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from pydantic import BaseModel, Field

from flashify.application.catalog import all_tags, filter_decks, sort_decks
from flashify.application.config import AppConfig, resolve_config
from flashify.application.flashcard_service import FlashcardService
from flashify.application.generation import GenerationService
from flashify.application.id_service import generate_id
from flashify.application.stats.service import StatsService
from flashify.application.utils.time import utc_now
from flashify.consts import VERSION
from flashify.domain.constants import CARD_ID_PREFIX, DECK_ID_PREFIX
from flashify.domain.errors import (
    CardNotFound,
    DeckNotFound,
    GenerationError,
    InvalidDifficulty,
    ValidationError,
)
from flashify.domain.models import Deck, Difficulty, Flashcard
from flashify.infrastructure.factory import build_flashcard_service, build_generation_service

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("flashify.server")


@lru_cache
def get_config() -> AppConfig:
    return resolve_config()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"Flashify Server v{VERSION} starting up...")
    yield
    # Shutdown
    logger.info("Flashify Server shutting down...")


app = FastAPI(
    title="Flashify Server",
    description="Deck, review and stats API for the Flashify study app.",
    version=VERSION,
    lifespan=lifespan,
)

start_time = time.time()

# Sync routes run in a threadpool; services must be built exactly once.
_services_lock = threading.Lock()


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


def get_flashcard_service(request: Request) -> FlashcardService:
    """The process-wide FlashcardService, built once on first use."""
    state = request.app.state
    if getattr(state, "flashcards", None) is None:
        with _services_lock:
            if getattr(state, "flashcards", None) is None:
                state.flashcards = build_flashcard_service(get_config())
    return state.flashcards


def get_stats_service(
    flashcards: FlashcardService = Depends(get_flashcard_service),
) -> StatsService:
    return StatsService(flashcards)


def get_generation_service(request: Request) -> GenerationService:
    state = request.app.state
    if getattr(state, "generation", None) is None:
        with _services_lock:
            if getattr(state, "generation", None) is None:
                state.generation = build_generation_service(get_config())
    return state.generation


def require_deck(flashcards: FlashcardService, deck_id: str) -> Deck:
    """Look up a deck or answer 404. Store lookups themselves never raise."""
    deck = flashcards.get_deck_by_id(deck_id)
    if deck is None:
        raise HTTPException(status_code=404, detail=str(DeckNotFound(deck_id)))
    return deck


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float


class FlashcardModel(BaseModel):
    id: str | None = None
    question: str
    answer: str
    deck_id: str = ""
    next_review_date: datetime | None = None
    difficulty: Literal["easy", "medium", "hard"] | None = None

    @classmethod
    def from_domain(cls, card: Flashcard) -> "FlashcardModel":
        return cls(
            id=card.id,
            question=card.question,
            answer=card.answer,
            deck_id=card.deck_id,
            next_review_date=card.next_review_date,
            difficulty=card.difficulty.value if card.difficulty else None,
        )

    def to_domain(self, now: datetime) -> Flashcard:
        return Flashcard(
            id=self.id or generate_id(CARD_ID_PREFIX),
            question=self.question,
            answer=self.answer,
            deck_id=self.deck_id,
            next_review_date=self.next_review_date or now,
            difficulty=Difficulty(self.difficulty) if self.difficulty else None,
        )


class DeckModel(BaseModel):
    id: str
    title: str
    description: str
    tags: list[str]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, deck: Deck) -> "DeckModel":
        return cls(
            id=deck.id,
            title=deck.title,
            description=deck.description,
            tags=list(deck.tags),
            created_at=deck.created_at,
            updated_at=deck.updated_at,
        )


class SaveDeckRequest(BaseModel):
    id: str | None = None  # Omit to create a new deck
    title: str
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    flashcards: list[FlashcardModel]


class SaveDeckResponse(BaseModel):
    deck: DeckModel
    flashcards: list[FlashcardModel]
    created: bool


class ReviewRequest(BaseModel):
    difficulty: str


class StatsResponse(BaseModel):
    streak: int
    last_study_date: datetime | None
    cards_reviewed: int
    cards_created: int
    study_days: dict[str, int]


class ChartPointModel(BaseModel):
    day: str
    date: date
    cards: int


class GenerateRequest(BaseModel):
    mode: Literal["topic", "text"] = "topic"
    input: str


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Simple health check to verify server is reachable.
    """
    return HealthResponse(status="ok", version=VERSION, uptime_seconds=time.time() - start_time)


@app.get("/version")
async def get_version():
    return {"version": VERSION}


@app.get("/decks", response_model=list[DeckModel])
def list_decks(
    q: str = "",
    tag: str | None = None,
    sort: Literal["recent", "title"] = "recent",
    flashcards: FlashcardService = Depends(get_flashcard_service),
):
    decks = sort_decks(filter_decks(flashcards.get_decks(), search=q, tag=tag), by=sort)
    return [DeckModel.from_domain(d) for d in decks]


@app.get("/tags")
def list_tags(flashcards: FlashcardService = Depends(get_flashcard_service)):
    return {"tags": all_tags(flashcards.get_decks())}


@app.post("/decks", response_model=SaveDeckResponse)
def save_deck(req: SaveDeckRequest, flashcards: FlashcardService = Depends(get_flashcard_service)):
    """Create a deck, or update it when an existing id is given."""
    now = utc_now()
    deck = Deck(
        id=req.id or generate_id(DECK_ID_PREFIX),
        title=req.title,
        description=req.description,
        tags=req.tags,
    )
    try:
        result = flashcards.save_deck(deck, [c.to_domain(now) for c in req.flashcards])
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    return SaveDeckResponse(
        deck=DeckModel.from_domain(result.deck),
        flashcards=[FlashcardModel.from_domain(c) for c in result.flashcards],
        created=result.created,
    )


@app.get("/decks/{deck_id}", response_model=DeckModel)
def get_deck(deck_id: str, flashcards: FlashcardService = Depends(get_flashcard_service)):
    return DeckModel.from_domain(require_deck(flashcards, deck_id))


@app.delete("/decks/{deck_id}")
def delete_deck(deck_id: str, flashcards: FlashcardService = Depends(get_flashcard_service)):
    if not flashcards.delete_deck(deck_id):
        raise HTTPException(status_code=404, detail=str(DeckNotFound(deck_id)))
    return {"ok": True}


@app.get("/decks/{deck_id}/cards", response_model=list[FlashcardModel])
def get_deck_cards(deck_id: str, flashcards: FlashcardService = Depends(get_flashcard_service)):
    require_deck(flashcards, deck_id)
    return [FlashcardModel.from_domain(c) for c in flashcards.get_flashcards_for_deck(deck_id)]


@app.get("/decks/{deck_id}/due", response_model=list[FlashcardModel])
def get_due_cards(deck_id: str, flashcards: FlashcardService = Depends(get_flashcard_service)):
    require_deck(flashcards, deck_id)
    return [FlashcardModel.from_domain(c) for c in flashcards.get_due_flashcards_for_deck(deck_id)]


@app.get("/decks/{deck_id}/summary")
def get_deck_summary(
    deck_id: str,
    flashcards: FlashcardService = Depends(get_flashcard_service),
    stats: StatsService = Depends(get_stats_service),
):
    require_deck(flashcards, deck_id)
    summary = stats.deck_summary(deck_id)
    return {
        "deck_id": summary.deck_id,
        "total_cards": summary.total_cards,
        "due_cards": summary.due_cards,
        "mastery": summary.mastery,
        "last_studied": summary.last_studied,
    }


@app.post("/cards/{card_id}/review", response_model=FlashcardModel)
def review_card(
    card_id: str,
    req: ReviewRequest,
    flashcards: FlashcardService = Depends(get_flashcard_service),
):
    try:
        updated = flashcards.review_card(card_id, req.difficulty)
    except InvalidDifficulty as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    if updated is None:
        raise HTTPException(status_code=404, detail=str(CardNotFound(card_id)))
    return FlashcardModel.from_domain(updated)


@app.get("/stats", response_model=StatsResponse)
def get_stats(flashcards: FlashcardService = Depends(get_flashcard_service)):
    s = flashcards.get_stats()
    return StatsResponse(
        streak=s.streak,
        last_study_date=s.last_study_date,
        cards_reviewed=s.cards_reviewed,
        cards_created=s.cards_created,
        study_days=s.study_days,
    )


@app.get("/stats/overview")
def get_overview(
    top: int | None = Query(default=4, ge=1),
    stats: StatsService = Depends(get_stats_service),
):
    overview = stats.overview(top_decks=top)
    b = overview.breakdown
    return {
        "streak": overview.stats.streak,
        "cards_reviewed": overview.stats.cards_reviewed,
        "cards_created": overview.stats.cards_created,
        "deck_count": overview.deck_count,
        "total_cards": b.total,
        "reviewed_cards": b.reviewed,
        "easy": {"count": b.easy, "percentage": b.easy_percentage},
        "medium": {"count": b.medium, "percentage": b.medium_percentage},
        "hard": {"count": b.hard, "percentage": b.hard_percentage},
        "mastery": overview.mastery,
        "mastery_level": overview.mastery_level,
        "deck_performance": [
            {"deck_id": p.deck_id, "title": p.title, "card_count": p.card_count, "mastery": p.mastery}
            for p in overview.deck_performance
        ],
    }


@app.get("/stats/chart", response_model=list[ChartPointModel])
def get_chart(
    days: int | None = Query(default=None, ge=1, le=366),
    stats: StatsService = Depends(get_stats_service),
):
    points = stats.chart(days=days or get_config().chart_days)
    return [ChartPointModel(day=p.label, date=p.date, cards=p.cards) for p in points]


@app.get("/stats/calendar")
def get_calendar(
    time_range: Literal["week", "month", "year"] = Query(default="month", alias="range"),
    stats: StatsService = Depends(get_stats_service),
):
    weeks = stats.heatmap(time_range=time_range)
    return {
        "study_days": stats.calendar(),
        "weeks": [
            {
                "start": w.start.isoformat(),
                "days": [
                    {"date": c.date.isoformat(), "value": c.value, "level": c.level, "label": c.label}
                    for c in w.days
                ],
            }
            for w in weeks
        ],
    }


@app.post("/generate", response_model=list[FlashcardModel])
async def generate_flashcards(
    req: GenerateRequest,
    generation: GenerationService = Depends(get_generation_service),
):
    """Generate unassigned flashcards from a topic or a block of text."""
    try:
        cards = await generation.generate(req.mode, req.input)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except GenerationError as e:
        logger.error(f"Generation failed: {e}")
        raise HTTPException(status_code=502, detail=str(e)) from e
    return [FlashcardModel.from_domain(c) for c in cards]


def run() -> None:
    import uvicorn

    config = get_config()
    uvicorn.run(app, host=config.host, port=config.port)


if __name__ == "__main__":
    run()
