"""Document-to-flashcard generation."""

from flashdeck_core.generation.generator import FlashcardGenerator, attribute_cards
from flashdeck_core.generation.pipeline import (
    BatchPipeline,
    FlashcardSink,
    PipelineResult,
)
from flashdeck_core.generation.prompts import build_flashcard_prompt

__all__ = [
    "BatchPipeline",
    "FlashcardGenerator",
    "FlashcardSink",
    "PipelineResult",
    "attribute_cards",
    "build_flashcard_prompt",
]
