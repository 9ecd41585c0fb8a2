"""PDF validation and batch splitting utilities."""

from io import BytesIO

from pypdf import PdfReader, PdfWriter

from flashdeck_core.errors import CorruptDocumentError
from flashdeck_core.schemas.document import PageBatch
from flashdeck_core.utils.logging import get_logger

logger = get_logger(__name__)

# PDF magic bytes
PDF_MAGIC = b"%PDF"

DEFAULT_BATCH_SIZE = 5


class PDFValidationError(CorruptDocumentError):
    """Error when PDF validation fails."""

    pass


def validate_pdf(data: bytes) -> bool:
    """Validate that data looks like a PDF file.

    Args:
        data: Raw file bytes

    Returns:
        True if valid PDF

    Raises:
        PDFValidationError: If validation fails
    """
    if not data:
        raise PDFValidationError("Empty file data")

    if len(data) < 4:
        raise PDFValidationError("File too small to be a valid PDF")

    if not data[:4].startswith(PDF_MAGIC):
        raise PDFValidationError(
            f"Invalid PDF: file does not start with PDF magic bytes. Got: {data[:4]!r}"
        )

    # PDFs should end with %%EOF
    if b"%%EOF" not in data[-1024:]:
        logger.warning("PDF does not contain %%EOF marker near end of file")

    logger.debug(f"PDF validation passed ({len(data)} bytes)")
    return True


def open_pdf(data: bytes) -> PdfReader:
    """Parse PDF bytes into a reader with at least one page.

    Raises:
        CorruptDocumentError: If the data cannot be parsed as a PDF
    """
    validate_pdf(data)
    try:
        reader = PdfReader(BytesIO(data))
        if reader.is_encrypted:
            # Owner-password-only PDFs open with an empty user password
            if not reader.decrypt(""):
                raise CorruptDocumentError("PDF is encrypted")
        page_count = len(reader.pages)
    except CorruptDocumentError:
        raise
    except Exception as e:
        raise CorruptDocumentError(f"Unable to parse PDF: {e}") from e

    if page_count == 0:
        raise CorruptDocumentError("PDF has no pages")
    return reader


def describe_pdf(data: bytes) -> dict[str, str | int | None]:
    """Summarize a PDF for storing with its document record.

    Returns:
        Dict with header version, page count, and document title if set

    Raises:
        CorruptDocumentError: If the data cannot be parsed as a PDF
    """
    reader = open_pdf(data)
    header = reader.pdf_header
    metadata = reader.metadata

    info: dict[str, str | int | None] = {
        "version": header[len("%PDF-") :] if header.startswith("%PDF-") else None,
        "page_count": len(reader.pages),
        "title": (metadata.title if metadata else None) or None,
    }
    logger.debug(f"PDF info: {info}")
    return info


def split_pdf_into_batches(
    data: bytes,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> list[PageBatch]:
    """Split a PDF into standalone PDFs of at most batch_size pages each.

    Batches cover every page exactly once, in order. Page numbers on each
    batch are absolute and 1-based, so batch N starts at one past the last
    page of batch N-1.

    Args:
        data: Raw PDF bytes
        batch_size: Maximum pages per batch

    Returns:
        Ordered list of page batches

    Raises:
        CorruptDocumentError: If the PDF cannot be parsed or re-encoded
        ValueError: If batch_size is less than 1
    """
    if batch_size < 1:
        raise ValueError("batch_size must be at least 1")

    reader = open_pdf(data)
    page_count = len(reader.pages)
    batches: list[PageBatch] = []

    for start in range(0, page_count, batch_size):
        end = min(start + batch_size, page_count)
        writer = PdfWriter()
        try:
            for page_index in range(start, end):
                writer.add_page(reader.pages[page_index])
            buffer = BytesIO()
            writer.write(buffer)
        except Exception as e:
            raise CorruptDocumentError(
                f"Unable to extract pages {start + 1}-{end}: {e}"
            ) from e

        batches.append(
            PageBatch(
                index=len(batches),
                page_numbers=list(range(start + 1, end + 1)),
                pdf_data=buffer.getvalue(),
            )
        )

    logger.info(
        f"Split PDF into {len(batches)} batches ({page_count} pages, {batch_size} per batch)"
    )
    return batches
