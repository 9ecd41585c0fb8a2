"""Generation client: one model call per page batch."""

from typing import Any

from flashdeck_core.config import PipelineConfig
from flashdeck_core.generation.prompts import build_flashcard_prompt
from flashdeck_core.model_adapters.base import BaseModelAdapter
from flashdeck_core.schemas.cards import GeneratedFlashcard, validate_batch_response
from flashdeck_core.schemas.document import PageBatch
from flashdeck_core.utils.logging import get_logger
from flashdeck_core.utils.response import parse_json_response

logger = get_logger(__name__)


def attribute_cards(
    payload: Any,
    page_numbers: list[int],
    filename: str,
    language: str,
) -> Any:
    """Force source, page, and language on every card in a parsed payload.

    Model-supplied attribution is never trusted. Card i is assigned
    ``page_numbers[i % len(page_numbers)]``, so the page locator wraps when
    the card count differs from the page count.
    """
    if not isinstance(payload, dict):
        return payload
    cards = payload.get("flashcards")
    if not isinstance(cards, list):
        return payload

    if cards and len(cards) != len(page_numbers):
        logger.debug(
            f"Model returned {len(cards)} cards for {len(page_numbers)} pages; "
            "page locators wrap over the batch"
        )

    attributed = []
    for index, card in enumerate(cards):
        if isinstance(card, dict):
            card = {
                **card,
                "source": filename,
                "page": str(page_numbers[index % len(page_numbers)]),
                "language": language,
            }
        attributed.append(card)
    return {**payload, "flashcards": attributed}


class FlashcardGenerator:
    """Generates validated flashcards for a single page batch."""

    def __init__(
        self,
        adapter: BaseModelAdapter,
        config: PipelineConfig | None = None,
    ):
        self.adapter = adapter
        self.config = config or PipelineConfig()

    async def generate_batch(
        self,
        batch: PageBatch,
        filename: str,
        language: str,
    ) -> list[GeneratedFlashcard]:
        """Run one generation request for a batch.

        Args:
            batch: Page batch with standalone PDF bytes
            filename: Source document filename stamped on every card
            language: Target output language

        Returns:
            Validated flashcards

        Raises:
            TransientGenerationError: On network, parse, or schema failures
            PermanentGenerationError: If the model rejects the request outright
        """
        logger.info(
            f"Generating flashcards for pages {batch.first_page}-{batch.last_page} "
            f"of {filename} ({language})"
        )
        prompt = build_flashcard_prompt(filename, language, batch.page_numbers)
        text = await self.adapter.generate_from_document(
            prompt, batch.pdf_data, mime_type="application/pdf"
        )

        payload = parse_json_response(text)
        payload = attribute_cards(payload, batch.page_numbers, filename, language)
        response = validate_batch_response(payload)

        logger.info(
            f"Generated {len(response.flashcards)} flashcards for pages "
            f"{batch.first_page}-{batch.last_page}"
        )
        return response.flashcards
