"""Recovery of JSON payloads from free-form model text."""

import json
import re
from typing import Any

from flashdeck_core.errors import ResponseParseError
from flashdeck_core.utils.logging import get_logger

logger = get_logger(__name__)

_FENCE_PATTERN = re.compile(r"```json\s*|\s*```")


def clean_json_response(text: str) -> str:
    """Return the best-effort JSON substring of a model response.

    Code fences are removed and the text is cut down to the span between the
    first ``{`` and the last ``}``. Without such a span the trimmed text is
    returned unchanged and parsing is left to fail downstream.
    """
    text = _FENCE_PATTERN.sub("", text)

    json_start = text.find("{")
    json_end = text.rfind("}")
    if json_start != -1 and json_end != -1 and json_end > json_start:
        text = text[json_start : json_end + 1]

    return text.strip()


def parse_json_response(text: str) -> Any:
    """Clean and decode a model response.

    Raises:
        ResponseParseError: If no valid JSON can be recovered
    """
    if not text or not text.strip():
        raise ResponseParseError("Empty response from model", raw_text=text or "")

    cleaned = clean_json_response(text)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse JSON response: {e}. Content: {cleaned[:200]}...")
        raise ResponseParseError(f"Invalid JSON in model response: {e}", raw_text=text) from e
