"""Pydantic schemas for API request and response models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class DocumentResponse(BaseModel):
    """Uploaded document response payload."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    filename: str
    url: str
    mime_type: str
    size: int
    page_count: int
    language: str
    metadata: dict | None = Field(None, validation_alias="metadata_json")
    processing_state: str
    last_batch_index: int
    error_message: str | None = None
    created_at: datetime


class DocumentListResponse(BaseModel):
    """List response for documents."""

    documents: list[DocumentResponse]


class DocumentUploadResponse(BaseModel):
    """Response returned after uploading and processing a document."""

    message: str
    file_url: str = Field(..., serialization_alias="fileUrl")
    document_id: int = Field(..., serialization_alias="documentId")
    flashcard_count: int = Field(0, serialization_alias="flashcardCount")


class DocumentDeleteResponse(BaseModel):
    """Response returned after deleting a document."""

    success: bool = True
    deleted_flashcards: int = 0


class FlashcardResponse(BaseModel):
    """Flashcard response payload."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    document_id: int | None = None
    term: str
    definition: str
    hint: str | None = None
    explanation: str | None = None
    key_concept: str | None = None
    source: str
    page: str
    difficulty: int
    index: int
    language: str | None = None
    metadata: dict | None = Field(None, validation_alias="metadata_json")
    correct_attempts: int
    total_attempts: int
    review_status: str
    last_reviewed_at: datetime | None = None
    next_review_at: datetime | None = None
    created_at: datetime


class FlashcardListResponse(BaseModel):
    """List response for flashcards."""

    flashcards: list[FlashcardResponse]


class FlashcardCreate(BaseModel):
    """Payload for adding a flashcard by hand."""

    term: str = Field(..., min_length=1)
    definition: str = Field(..., min_length=1)
    hint: str | None = None
    explanation: str | None = None
    key_concept: str | None = None
    source: str = Field(..., min_length=1)
    page: str = Field("1", min_length=1)
    difficulty: int = Field(50, ge=1, le=100)
    document_id: int | None = None
    language: str | None = None

    model_config = ConfigDict(str_strip_whitespace=True)


class FlashcardUpdate(BaseModel):
    """Partial update payload for flashcards."""

    term: str | None = Field(None, min_length=1)
    definition: str | None = Field(None, min_length=1)
    hint: str | None = None
    explanation: str | None = None
    key_concept: str | None = None
    page: str | None = Field(None, min_length=1)
    difficulty: int | None = Field(None, ge=1, le=100)
    language: str | None = None
    metadata_json: dict | None = Field(None, alias="metadata")

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)


class FlashcardReorderRequest(BaseModel):
    """New display order as a complete list of flashcard IDs."""

    ids: list[int]


class FlashcardReviewRequest(BaseModel):
    """A single review answer."""

    correct: bool
