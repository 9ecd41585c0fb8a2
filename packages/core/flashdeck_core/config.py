"""Configuration for the document-to-flashcard pipeline."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PipelineConfig:
    """Configuration values for batching, retries, and model calls."""

    # Pages per generation request
    batch_size: int = 5

    # Retry orchestration: attempts are total, delay doubles after each failure
    max_retries: int = 3
    initial_retry_delay: float = 1.0  # seconds

    # Model
    model_name: str = "gemini-1.5-flash"
    request_timeout: float = 120.0  # seconds

    def __post_init__(self) -> None:
        if self.batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        if self.max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        if self.initial_retry_delay < 0:
            raise ValueError("initial_retry_delay must not be negative")
