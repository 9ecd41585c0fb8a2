"""flashdeck-core: Pipeline for turning PDF study documents into flashcards.

A document is split into fixed-size page batches, each batch is sent to a
generative model as a standalone PDF, and the model's JSON reply is cleaned,
validated, and attributed to the batch's pages before being handed to a sink
for persistence.

    >>> from flashdeck_core import BatchPipeline, FlashcardGenerator, GoogleAdapter
    >>> generator = FlashcardGenerator(GoogleAdapter(api_key="..."))
    >>> result = await BatchPipeline(generator).process_document(
    ...     pdf_bytes, "lecture.pdf", "en", sink
    ... )
"""

from flashdeck_core.config import PipelineConfig
from flashdeck_core.errors import (
    CorruptDocumentError,
    PermanentGenerationError,
    ProcessingError,
    SchemaViolationError,
    TransientGenerationError,
)
from flashdeck_core.generation import BatchPipeline, FlashcardGenerator, FlashcardSink
from flashdeck_core.model_adapters import BaseModelAdapter, GoogleAdapter
from flashdeck_core.schemas.cards import GeneratedFlashcard
from flashdeck_core.schemas.document import PageBatch, ProcessingState

__version__ = "0.1.0"

__all__ = [
    # Pipeline
    "BatchPipeline",
    "FlashcardGenerator",
    "FlashcardSink",
    "PipelineConfig",
    # Adapters
    "BaseModelAdapter",
    "GoogleAdapter",
    # Schemas
    "GeneratedFlashcard",
    "PageBatch",
    "ProcessingState",
    # Errors
    "CorruptDocumentError",
    "PermanentGenerationError",
    "ProcessingError",
    "SchemaViolationError",
    "TransientGenerationError",
]
