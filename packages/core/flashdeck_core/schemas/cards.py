"""Flashcard schemas and validation of model output."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from flashdeck_core.errors import SchemaViolationError


class FlashcardMetadata(BaseModel):
    """Structured provenance for a generated flashcard."""

    chapter: str
    section: str | None = ""
    topic: str
    language: str = Field(..., min_length=2)
    line_number: int = Field(..., gt=0, alias="lineNumber")
    page_number: int = Field(..., gt=0, alias="pageNumber")
    model_config = ConfigDict(populate_by_name=True)


class GeneratedFlashcard(BaseModel):
    """A single flashcard as produced by the model."""

    term: str = Field(..., min_length=1)
    definition: str = Field(..., min_length=1)
    hint: str | None = None
    explanation: str | None = None
    source: str = Field(..., min_length=1, description="Source document filename")
    page: str = Field(..., min_length=1, description="Page locator")
    key_concept: str | None = Field(None, alias="keyConcept")
    difficulty: int = Field(..., ge=1, le=100)
    index: int = 0
    language: str | None = Field(None, min_length=2)
    metadata: FlashcardMetadata | None = None
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    @field_validator("page", mode="before")
    @classmethod
    def _coerce_page(cls, value: Any) -> Any:
        # Models sometimes emit bare integers for the page locator
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class FlashcardBatchResponse(BaseModel):
    """Envelope returned by the model for one batch."""

    flashcards: list[GeneratedFlashcard]


def _format_location(loc: tuple[int | str, ...]) -> str:
    """Render a pydantic error location as a dotted path."""
    parts: list[str] = []
    for item in loc:
        if isinstance(item, int):
            parts.append(f"[{item}]")
        elif parts:
            parts.append(f".{item}")
        else:
            parts.append(str(item))
    return "".join(parts) or "<root>"


def validate_batch_response(payload: Any) -> FlashcardBatchResponse:
    """Validate parsed model output against the batch envelope schema.

    Args:
        payload: Parsed JSON from the model

    Returns:
        Validated batch response

    Raises:
        SchemaViolationError: Naming the first field and constraint that failed
    """
    try:
        return FlashcardBatchResponse.model_validate(payload)
    except ValidationError as e:
        error = e.errors()[0]
        field = _format_location(error.get("loc", ()))
        constraint = error.get("type", "invalid")
        raise SchemaViolationError(
            field=field,
            constraint=constraint,
            message=f"Invalid flashcard data at {field}: {error.get('msg', constraint)}",
        ) from e
