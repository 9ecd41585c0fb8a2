"""Document and page batch schemas."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ProcessingState(str, Enum):
    """Processing state of an uploaded document."""

    PENDING = "pending"
    PARTIALLY_COMPLETE = "partially_complete"
    COMPLETE = "complete"
    FAILED = "failed"


class PageBatch(BaseModel):
    """A contiguous run of pages re-encoded as a standalone PDF."""

    index: int = Field(..., ge=0, description="0-based batch index")
    page_numbers: list[int] = Field(
        ..., min_length=1, description="1-based absolute page numbers"
    )
    pdf_data: bytes = Field(..., description="Standalone PDF bytes for the batch")
    model_config = ConfigDict(frozen=True)

    @property
    def page_count(self) -> int:
        """Number of pages in the batch."""
        return len(self.page_numbers)

    @property
    def first_page(self) -> int:
        return self.page_numbers[0]

    @property
    def last_page(self) -> int:
        return self.page_numbers[-1]
