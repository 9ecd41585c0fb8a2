"""Sequential batch pipeline with incremental persistence."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Protocol

from flashdeck_core.config import PipelineConfig
from flashdeck_core.errors import ProcessingError
from flashdeck_core.generation.generator import FlashcardGenerator
from flashdeck_core.schemas.cards import GeneratedFlashcard
from flashdeck_core.schemas.document import PageBatch
from flashdeck_core.utils.logging import get_logger
from flashdeck_core.utils.pdf import split_pdf_into_batches
from flashdeck_core.utils.retry import with_retry

logger = get_logger(__name__)


class FlashcardSink(Protocol):
    """Destination for flashcards as each batch completes."""

    async def add_flashcard(self, card: GeneratedFlashcard, batch: PageBatch) -> None:
        """Persist a single flashcard."""
        ...

    async def batch_completed(self, batch: PageBatch, card_count: int) -> None:
        """Called once every card of a batch has been persisted."""
        ...


@dataclass
class PipelineResult:
    """Outcome of a completed pipeline run."""

    total_batches: int
    batches_processed: int
    flashcards_created: int


class BatchPipeline:
    """Processes page batches strictly in order, one model call chain at a time.

    Each batch is generated under the retry policy from the config and its
    cards are handed to the sink one by one before the next batch begins.
    A batch that exhausts its retries aborts the run; cards from earlier
    batches stay persisted.
    """

    def __init__(
        self,
        generator: FlashcardGenerator,
        config: PipelineConfig | None = None,
        sleep: Callable[[float], Awaitable[None]] | None = None,
    ):
        self.generator = generator
        self.config = config or generator.config
        self._sleep = sleep

    async def run(
        self,
        batches: list[PageBatch],
        filename: str,
        language: str,
        sink: FlashcardSink,
        start_batch: int = 0,
    ) -> PipelineResult:
        """Generate and persist flashcards for every batch from start_batch on.

        Args:
            batches: All batches of the document, in page order
            filename: Source document filename
            language: Target output language
            sink: Persistence target
            start_batch: Index of the first batch to process, for resumption

        Returns:
            Counts for the run

        Raises:
            ProcessingError: When a batch fails terminally or cannot be stored
        """
        total = len(batches)
        pending = [batch for batch in batches if batch.index >= start_batch]
        logger.info(
            f"Starting flashcard generation for {filename}: "
            f"{len(pending)} of {total} batches to process"
        )

        created = 0
        for batch in pending:
            cards = await with_retry(
                self.generator.generate_batch,
                batch,
                filename,
                language,
                max_attempts=self.config.max_retries,
                initial_delay=self.config.initial_retry_delay,
                operation_name=(
                    f"batch {batch.index + 1}/{total} "
                    f"(pages {batch.first_page}-{batch.last_page})"
                ),
                sleep=self._sleep,
            )

            for card in cards:
                await self._store(sink, card, batch)
            await self._complete(sink, batch, len(cards))
            created += len(cards)
            logger.info(
                f"Stored {len(cards)} flashcards for batch {batch.index + 1}/{total}"
            )

        logger.info(f"Flashcard generation complete for {filename} ({created} cards)")
        return PipelineResult(
            total_batches=total,
            batches_processed=len(pending),
            flashcards_created=created,
        )

    async def process_document(
        self,
        pdf_data: bytes,
        filename: str,
        language: str,
        sink: FlashcardSink,
    ) -> PipelineResult:
        """Split a PDF and run every batch.

        Raises:
            CorruptDocumentError: If the PDF cannot be split
            ProcessingError: When a batch fails terminally
        """
        batches = split_pdf_into_batches(pdf_data, self.config.batch_size)
        return await self.run(batches, filename, language, sink)

    async def _store(
        self,
        sink: FlashcardSink,
        card: GeneratedFlashcard,
        batch: PageBatch,
    ) -> None:
        try:
            await sink.add_flashcard(card, batch)
        except ProcessingError:
            raise
        except Exception as e:
            logger.error(f"Failed to store flashcard '{card.term}': {e}")
            raise ProcessingError("Failed to store flashcard", status=500) from e

    async def _complete(
        self,
        sink: FlashcardSink,
        batch: PageBatch,
        card_count: int,
    ) -> None:
        try:
            await sink.batch_completed(batch, card_count)
        except ProcessingError:
            raise
        except Exception as e:
            logger.error(
                f"Failed to record completion of batch {batch.index + 1}: {e}"
            )
            raise ProcessingError("Failed to store flashcard batch", status=500) from e
