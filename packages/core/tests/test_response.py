"""Tests for model response cleaning."""

import pytest

from flashdeck_core.errors import ResponseParseError, TransientGenerationError
from flashdeck_core.utils.response import clean_json_response, parse_json_response


class TestCleanJsonResponse:
    """Tests for the JSON response cleaner."""

    def test_clean_json_unchanged(self) -> None:
        """Already-clean JSON passes through."""
        text = '{"flashcards": []}'
        assert clean_json_response(text) == text

    def test_strips_code_fences(self) -> None:
        """Test that markdown fences are removed."""
        text = '```json\n{"flashcards": []}\n```'
        assert clean_json_response(text) == '{"flashcards": []}'

    def test_strips_surrounding_prose(self) -> None:
        """Test that explanations around the JSON are dropped."""
        text = 'Here are your cards:\n{"a": {"b": 1}}\nLet me know if you need more!'
        assert clean_json_response(text) == '{"a": {"b": 1}}'

    def test_no_braces_returns_trimmed_text(self) -> None:
        """Without a brace pair the trimmed input comes back."""
        assert clean_json_response("   I cannot help with that.  ") == (
            "I cannot help with that."
        )

    @pytest.mark.parametrize(
        "text",
        [
            '{"flashcards": []}',
            '```json\n{"x": 1}\n```',
            'prose {"x": "}"} more prose',
            "no json here",
            "",
        ],
    )
    def test_idempotent(self, text: str) -> None:
        """Cleaning twice gives the same result as cleaning once."""
        once = clean_json_response(text)
        assert clean_json_response(once) == once


class TestParseJsonResponse:
    """Tests for parsing cleaned responses."""

    def test_parses_fenced_json(self) -> None:
        """Test parsing JSON wrapped in fences."""
        assert parse_json_response('```json\n{"flashcards": [1]}\n```') == {
            "flashcards": [1]
        }

    def test_invalid_json_raises_transient_error(self) -> None:
        """Unparseable text is a retryable failure."""
        with pytest.raises(ResponseParseError) as exc_info:
            parse_json_response("Sorry, I can't do that")

        assert isinstance(exc_info.value, TransientGenerationError)
        assert exc_info.value.raw_text == "Sorry, I can't do that"

    def test_empty_response_raises(self) -> None:
        """Test that an empty reply is rejected."""
        with pytest.raises(ResponseParseError, match="Empty response"):
            parse_json_response("   ")
