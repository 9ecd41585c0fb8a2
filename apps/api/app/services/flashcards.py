"""Display ordering helpers for flashcards."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import models


async def next_flashcard_index(db: AsyncSession) -> int:
    """Return the index one past the current last flashcard."""
    result = await db.execute(select(func.max(models.Flashcard.index)))
    current = result.scalar_one()
    return 0 if current is None else current + 1


async def reindex_flashcards(db: AsyncSession) -> None:
    """Reassign indices so the flashcard order is dense from 0 to N-1."""
    result = await db.execute(
        select(models.Flashcard).order_by(models.Flashcard.index, models.Flashcard.id)
    )
    for position, card in enumerate(result.scalars().all()):
        if card.index != position:
            card.index = position
