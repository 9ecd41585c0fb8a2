"""Runs the flashcard pipeline for an uploaded document."""

from typing import Any

from flashdeck_core.errors import CorruptDocumentError, ProcessingError
from flashdeck_core.generation import BatchPipeline, FlashcardGenerator, PipelineResult
from flashdeck_core.model_adapters import BaseModelAdapter, GoogleAdapter
from flashdeck_core.schemas.cards import GeneratedFlashcard
from flashdeck_core.schemas.document import PageBatch, ProcessingState
from flashdeck_core.utils.logging import get_logger
from flashdeck_core.utils.pdf import describe_pdf, split_pdf_into_batches
from redis.exceptions import RedisError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import models
from app.services.flashcards import next_flashcard_index
from app.services.progress import publish_progress
from app.settings import settings

logger = get_logger(__name__)

CORRUPT_DOCUMENT_MESSAGE = (
    "Failed to process the PDF file. It may be corrupted or in an unsupported format."
)


async def _report_progress(document_id: int, event: dict[str, Any]) -> None:
    """Publish a progress event without letting a Redis outage affect processing."""
    try:
        await publish_progress(document_id, event)
    except (RedisError, OSError) as e:
        logger.warning(f"Failed to publish progress for document {document_id}: {e}")


def get_model_adapter() -> BaseModelAdapter:
    """Dependency that provides the configured generative model adapter."""
    if not settings.google_api_key:
        logger.error("GOOGLE_API_KEY is not configured")
        raise ProcessingError("Failed to initialize services", status=500)
    return GoogleAdapter(
        api_key=settings.google_api_key,
        model=settings.gemini_model_name,
        timeout=settings.request_timeout,
    )


class DatabaseFlashcardSink:
    """Stores each generated flashcard as soon as it arrives.

    Every card is committed on its own and the document's batch bookkeeping
    is committed after each batch, so a failed run leaves a resumable
    record of how far it got.
    """

    def __init__(
        self,
        db: AsyncSession,
        document: models.Document,
        total_batches: int,
    ):
        self.db = db
        self.document = document
        self.total_batches = total_batches

    async def add_flashcard(self, card: GeneratedFlashcard, batch: PageBatch) -> None:
        metadata = None
        if card.metadata is not None:
            metadata = {
                **card.metadata.model_dump(by_alias=True),
                "filename": self.document.filename,
            }

        # Read per card so cards added elsewhere mid-run keep the order dense
        index = await next_flashcard_index(self.db)
        self.db.add(
            models.Flashcard(
                document_id=self.document.id,
                term=card.term,
                definition=card.definition,
                hint=card.hint,
                explanation=card.explanation,
                key_concept=card.key_concept,
                source=self.document.filename,
                page=card.page,
                difficulty=card.difficulty,
                index=index,
                language=card.language,
                metadata_json=metadata,
            )
        )
        await self.db.commit()

    async def batch_completed(self, batch: PageBatch, card_count: int) -> None:
        is_last = batch.index == self.total_batches - 1
        self.document.last_batch_index = batch.index
        self.document.processing_state = (
            ProcessingState.COMPLETE.value
            if is_last
            else ProcessingState.PARTIALLY_COMPLETE.value
        )
        await self.db.commit()
        await _report_progress(
            self.document.id,
            {
                "batch": batch.index + 1,
                "total_batches": self.total_batches,
                "cards": card_count,
                "state": self.document.processing_state,
            },
        )


async def _mark_failed(
    db: AsyncSession,
    document: models.Document,
    message: str,
) -> None:
    """Record a terminal failure on the document."""
    await db.rollback()
    await db.refresh(document)
    document.processing_state = ProcessingState.FAILED.value
    document.error_message = message
    await db.commit()
    await _report_progress(
        document.id,
        {
            "batch": document.last_batch_index + 1,
            "state": document.processing_state,
            "error": message,
        },
    )


async def process_document(
    db: AsyncSession,
    document: models.Document,
    pdf_data: bytes,
    adapter: BaseModelAdapter,
    start_batch: int = 0,
) -> PipelineResult:
    """Split a stored document and generate flashcards for its batches.

    Args:
        db: Database session
        document: Document row (already committed)
        pdf_data: Raw PDF bytes of the document
        adapter: Model adapter for generation
        start_batch: First batch to process, for resuming a failed run

    Returns:
        Pipeline counts

    Raises:
        CorruptDocumentError: If the PDF cannot be split
        ProcessingError: If a batch fails terminally
    """
    config = settings.pipeline_config()

    try:
        batches = split_pdf_into_batches(pdf_data, document.batch_size)
    except CorruptDocumentError as e:
        logger.error(f"Error splitting {document.filename} into batches: {e}")
        await _mark_failed(db, document, CORRUPT_DOCUMENT_MESSAGE)
        raise

    info = describe_pdf(pdf_data)
    metadata = {**(document.metadata_json or {}), "pdfVersion": info["version"]}
    if info["title"]:
        metadata["title"] = info["title"]
    document.metadata_json = metadata
    document.page_count = sum(batch.page_count for batch in batches)
    document.error_message = None
    await db.commit()

    sink = DatabaseFlashcardSink(db, document, total_batches=len(batches))
    pipeline = BatchPipeline(FlashcardGenerator(adapter, config), config)

    try:
        result = await pipeline.run(
            batches,
            document.filename,
            document.language,
            sink,
            start_batch=start_batch,
        )
    except ProcessingError as e:
        await _mark_failed(db, document, e.message)
        raise

    if document.processing_state != ProcessingState.COMPLETE.value:
        document.processing_state = ProcessingState.COMPLETE.value
        await db.commit()
    return result
