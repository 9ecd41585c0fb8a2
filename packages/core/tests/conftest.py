"""Shared fixtures for core tests."""

import pytest

from fakes import RecordingSink, make_pdf
from flashdeck_core.config import PipelineConfig
from flashdeck_core.schemas.document import PageBatch


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def fast_config() -> PipelineConfig:
    """Pipeline config without backoff delays."""
    return PipelineConfig(batch_size=5, max_retries=3, initial_retry_delay=0)


@pytest.fixture
def batch() -> PageBatch:
    """A three-page batch starting at page 6."""
    return PageBatch(index=1, page_numbers=[6, 7, 8], pdf_data=make_pdf(3))
