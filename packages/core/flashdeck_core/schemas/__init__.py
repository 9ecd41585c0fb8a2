"""Data schemas for the flashcard pipeline."""

from flashdeck_core.schemas.cards import (
    FlashcardBatchResponse,
    FlashcardMetadata,
    GeneratedFlashcard,
    validate_batch_response,
)
from flashdeck_core.schemas.document import PageBatch, ProcessingState

__all__ = [
    # Documents
    "PageBatch",
    "ProcessingState",
    # Cards
    "FlashcardBatchResponse",
    "FlashcardMetadata",
    "GeneratedFlashcard",
    "validate_batch_response",
]
