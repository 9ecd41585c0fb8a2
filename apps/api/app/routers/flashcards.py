"""Flashcard CRUD, ordering, and review routes."""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Response
from flashdeck_core.review import ReviewState, ReviewStatus, record_review
from flashdeck_core.utils.logging import get_logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import models
from app.db.session import get_db
from app.schemas.api import (
    FlashcardCreate,
    FlashcardListResponse,
    FlashcardReorderRequest,
    FlashcardResponse,
    FlashcardReviewRequest,
    FlashcardUpdate,
)
from app.services.flashcards import next_flashcard_index, reindex_flashcards

logger = get_logger(__name__)

router = APIRouter()

# Columns that may be cleared with an explicit null in a PATCH
_NULLABLE_FIELDS = {"hint", "explanation", "key_concept", "language", "metadata_json"}


async def _get_flashcard_or_404(db: AsyncSession, flashcard_id: int) -> models.Flashcard:
    flashcard = await db.get(models.Flashcard, flashcard_id)
    if not flashcard:
        raise HTTPException(status_code=404, detail="Flashcard not found")
    return flashcard


@router.get("/flashcards", response_model=FlashcardListResponse)
async def list_flashcards(
    source: str | None = None,
    document_id: int | None = None,
    db: AsyncSession = Depends(get_db),
) -> FlashcardListResponse:
    """List flashcards in display order."""
    query = select(models.Flashcard).order_by(
        models.Flashcard.index, models.Flashcard.id
    )
    if source is not None:
        query = query.where(models.Flashcard.source == source)
    if document_id is not None:
        query = query.where(models.Flashcard.document_id == document_id)

    result = await db.execute(query)
    return FlashcardListResponse(
        flashcards=[FlashcardResponse.model_validate(c) for c in result.scalars().all()]
    )


@router.post("/flashcards", response_model=FlashcardResponse, status_code=201)
async def create_flashcard(
    data: FlashcardCreate,
    db: AsyncSession = Depends(get_db),
) -> FlashcardResponse:
    """Add a flashcard by hand at the end of the list."""
    if data.document_id is not None:
        document = await db.get(models.Document, data.document_id)
        if not document:
            raise HTTPException(status_code=404, detail="Document not found")

    flashcard = models.Flashcard(
        **data.model_dump(),
        index=await next_flashcard_index(db),
    )
    db.add(flashcard)
    await db.commit()
    await db.refresh(flashcard)
    return FlashcardResponse.model_validate(flashcard)


@router.put("/flashcards/order", response_model=FlashcardListResponse)
async def reorder_flashcards(
    data: FlashcardReorderRequest,
    db: AsyncSession = Depends(get_db),
) -> FlashcardListResponse:
    """Set the display order from a complete list of flashcard IDs."""
    result = await db.execute(select(models.Flashcard))
    flashcards = {card.id: card for card in result.scalars().all()}

    if len(data.ids) != len(set(data.ids)) or set(data.ids) != set(flashcards):
        raise HTTPException(
            status_code=400,
            detail="Order must list every flashcard ID exactly once",
        )

    ordered = []
    for position, flashcard_id in enumerate(data.ids):
        card = flashcards[flashcard_id]
        card.index = position
        ordered.append(card)
    await db.commit()

    return FlashcardListResponse(
        flashcards=[FlashcardResponse.model_validate(c) for c in ordered]
    )


@router.get("/flashcards/{flashcard_id}", response_model=FlashcardResponse)
async def get_flashcard(
    flashcard_id: int,
    db: AsyncSession = Depends(get_db),
) -> FlashcardResponse:
    """Get a flashcard by ID."""
    flashcard = await _get_flashcard_or_404(db, flashcard_id)
    return FlashcardResponse.model_validate(flashcard)


@router.patch("/flashcards/{flashcard_id}", response_model=FlashcardResponse)
async def update_flashcard(
    flashcard_id: int,
    data: FlashcardUpdate,
    db: AsyncSession = Depends(get_db),
) -> FlashcardResponse:
    """Update selected fields of a flashcard."""
    flashcard = await _get_flashcard_or_404(db, flashcard_id)

    updates = data.model_dump(exclude_unset=True)
    for field, value in updates.items():
        if value is None and field not in _NULLABLE_FIELDS:
            raise HTTPException(status_code=400, detail=f"{field} cannot be null")
        setattr(flashcard, field, value)

    await db.commit()
    await db.refresh(flashcard)
    return FlashcardResponse.model_validate(flashcard)


@router.delete("/flashcards/{flashcard_id}", status_code=204)
async def delete_flashcard(
    flashcard_id: int,
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Delete a flashcard and close the gap in the display order."""
    flashcard = await _get_flashcard_or_404(db, flashcard_id)
    await db.delete(flashcard)
    await db.flush()
    await reindex_flashcards(db)
    await db.commit()
    return Response(status_code=204)


@router.post("/flashcards/{flashcard_id}/review", response_model=FlashcardResponse)
async def review_flashcard(
    flashcard_id: int,
    data: FlashcardReviewRequest,
    db: AsyncSession = Depends(get_db),
) -> FlashcardResponse:
    """Record one review answer for a flashcard."""
    flashcard = await _get_flashcard_or_404(db, flashcard_id)

    state = record_review(
        ReviewState(
            correct_attempts=flashcard.correct_attempts,
            total_attempts=flashcard.total_attempts,
            streak=flashcard.review_streak,
            status=ReviewStatus(flashcard.review_status),
            last_reviewed_at=flashcard.last_reviewed_at,
            next_review_at=flashcard.next_review_at,
        ),
        correct=data.correct,
        now=datetime.utcnow(),
    )
    flashcard.correct_attempts = state.correct_attempts
    flashcard.total_attempts = state.total_attempts
    flashcard.review_streak = state.streak
    flashcard.review_status = state.status.value
    flashcard.last_reviewed_at = state.last_reviewed_at
    flashcard.next_review_at = state.next_review_at

    await db.commit()
    await db.refresh(flashcard)
    logger.info(
        f"Reviewed flashcard {flashcard.id}: {state.correct_attempts}/"
        f"{state.total_attempts} correct, status {state.status.value}"
    )
    return FlashcardResponse.model_validate(flashcard)
