"""Utility functions."""

from flashdeck_core.utils.logging import get_logger, log_exceptions
from flashdeck_core.utils.pdf import (
    PDFValidationError,
    describe_pdf,
    split_pdf_into_batches,
    validate_pdf,
)
from flashdeck_core.utils.response import clean_json_response, parse_json_response
from flashdeck_core.utils.retry import with_retry

__all__ = [
    "clean_json_response",
    "get_logger",
    "log_exceptions",
    "parse_json_response",
    "PDFValidationError",
    "describe_pdf",
    "split_pdf_into_batches",
    "validate_pdf",
    "with_retry",
]
