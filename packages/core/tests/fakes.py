"""Fakes and builders shared by core tests."""

import json
from io import BytesIO
from typing import Any

from pypdf import PdfWriter

from flashdeck_core.model_adapters.base import BaseModelAdapter
from flashdeck_core.schemas.cards import GeneratedFlashcard
from flashdeck_core.schemas.document import PageBatch


def make_pdf(page_count: int) -> bytes:
    """Build a PDF whose page i (0-based) is 200+i points wide."""
    writer = PdfWriter()
    for index in range(page_count):
        writer.add_blank_page(width=200 + index, height=300)
    buffer = BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def card_payload(count: int, **overrides: Any) -> str:
    """Render a model-style JSON reply containing count flashcards."""
    cards = []
    for index in range(count):
        card = {
            "term": f"Term {index}",
            "definition": f"Definition {index}",
            "hint": "A hint",
            "explanation": "Some context",
            "keyConcept": "Concept",
            "difficulty": 40,
            "source": "whatever.pdf",
            "page": "99",
            "language": "en",
        }
        card.update(overrides)
        cards.append(card)
    return json.dumps({"flashcards": cards})


class ScriptedAdapter(BaseModelAdapter):
    """Adapter that replays scripted replies and records every call.

    Each entry in replies is either a string returned as model text or an
    exception instance raised from the call. The last entry repeats once the
    script runs out.
    """

    def __init__(self, replies: list[Any]):
        self.replies = replies
        self.calls: list[dict[str, Any]] = []

    async def generate_from_document(
        self,
        prompt: str,
        document_data: bytes,
        mime_type: str = "application/pdf",
    ) -> str:
        self.calls.append(
            {"prompt": prompt, "document_data": document_data, "mime_type": mime_type}
        )
        reply = self.replies[min(len(self.calls) - 1, len(self.replies) - 1)]
        if isinstance(reply, BaseException):
            raise reply
        return reply


class RecordingSink:
    """In-memory flashcard sink."""

    def __init__(self, fail_on: int | None = None):
        self.cards: list[tuple[GeneratedFlashcard, PageBatch]] = []
        self.completed: list[tuple[int, int]] = []
        self.fail_on = fail_on

    async def add_flashcard(self, card: GeneratedFlashcard, batch: PageBatch) -> None:
        if self.fail_on is not None and len(self.cards) == self.fail_on:
            raise RuntimeError("database unavailable")
        self.cards.append((card, batch))

    async def batch_completed(self, batch: PageBatch, card_count: int) -> None:
        self.completed.append((batch.index, card_count))
