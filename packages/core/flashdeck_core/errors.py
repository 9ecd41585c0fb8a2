"""Exception hierarchy for the flashcard pipeline.

Generation failures are split into transient ones (network faults, rate
limits, unparseable or schema-violating model output) which the retry
orchestrator re-attempts, and permanent ones (bad credentials, rejected
requests) which abort immediately. Both end up as a ProcessingError once the
pipeline gives up on a batch.
"""


class FlashdeckError(Exception):
    """Base class for all flashdeck errors."""

    pass


class CorruptDocumentError(FlashdeckError):
    """Raised when a PDF cannot be parsed or split into batches."""

    pass


class GenerationError(FlashdeckError):
    """Base class for failures while generating flashcards for a batch."""

    pass


class TransientGenerationError(GenerationError):
    """A generation failure that may succeed if the request is repeated."""

    pass


class PermanentGenerationError(GenerationError):
    """A generation failure that repeating the request will not fix."""

    pass


class RateLimitError(TransientGenerationError):
    """Raised when the model API rate limit is exceeded."""

    pass


class ResponseParseError(TransientGenerationError):
    """Raised when the model response does not contain valid JSON."""

    def __init__(self, message: str, raw_text: str = ""):
        super().__init__(message)
        self.raw_text = raw_text


class SchemaViolationError(TransientGenerationError):
    """Raised when parsed model output does not match the flashcard schema."""

    def __init__(self, field: str, constraint: str, message: str | None = None):
        self.field = field
        self.constraint = constraint
        super().__init__(message or f"{field}: {constraint}")


class ProcessingError(FlashdeckError):
    """Terminal processing failure carrying an HTTP-style status code."""

    def __init__(self, message: str, status: int = 500, attempts: int = 0):
        super().__init__(message)
        self.message = message
        self.status = status
        self.attempts = attempts
