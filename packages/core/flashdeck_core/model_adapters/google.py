"""Google Gemini model adapter."""

import asyncio
from typing import Any

from flashdeck_core.errors import (
    GenerationError,
    PermanentGenerationError,
    RateLimitError,
    TransientGenerationError,
)
from flashdeck_core.model_adapters.base import BaseModelAdapter
from flashdeck_core.utils.logging import get_logger

logger = get_logger(__name__)

# Default timeout for API calls (seconds)
DEFAULT_TIMEOUT = 120.0
DEFAULT_MODEL = "gemini-1.5-flash"

# finish_reason 1 is STOP; anything else is truncated, blocked, or recited
_FINISH_REASON_STOP = 1


def _wrap_google_error(e: Exception) -> GenerationError:
    """Convert Google API errors into the generation failure taxonomy.

    Args:
        e: Original exception from the Google SDK

    Returns:
        RateLimitError, TransientGenerationError, or PermanentGenerationError
    """
    error_str = str(e).lower()
    error_type = type(e).__name__

    if any(
        indicator in error_str
        for indicator in [
            "resource exhausted",
            "quota",
            "rate limit",
            "429",
            "too many requests",
        ]
    ) or error_type in ("ResourceExhausted", "TooManyRequests"):
        return RateLimitError(f"Google API rate limit: {e}")

    if any(
        indicator in error_str
        for indicator in ["503", "500", "internal", "unavailable", "deadline"]
    ) or error_type in (
        "ServiceUnavailable",
        "InternalServerError",
        "DeadlineExceeded",
    ):
        return TransientGenerationError(f"Google API server error: {e}")

    if any(
        indicator in error_str
        for indicator in ["api key not valid", "permission denied", "unauthenticated"]
    ) or error_type in (
        "InvalidArgument",
        "PermissionDenied",
        "Unauthenticated",
        "Forbidden",
        "NotFound",
    ):
        return PermanentGenerationError(f"Google API rejected the request: {e}")

    return TransientGenerationError(f"Google API error: {e}")


class GoogleAdapter(BaseModelAdapter):
    """Adapter for Google Gemini models."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """Initialize the Google Gemini adapter.

        Args:
            api_key: Google AI API key
            model: Gemini model name
            timeout: Request timeout in seconds
        """
        if not api_key:
            raise PermanentGenerationError("Missing Google API key")
        self.api_key = api_key
        self.model = model
        self.timeout = timeout

        self._client: Any = None
        logger.info(f"Initialized Google adapter (model={model})")

    @property
    def client(self) -> Any:
        """Lazy-load the Google Generative AI client."""
        if self._client is None:
            import google.generativeai as genai

            genai.configure(api_key=self.api_key)
            self._client = genai
        return self._client

    async def generate_from_document(
        self,
        prompt: str,
        document_data: bytes,
        mime_type: str = "application/pdf",
    ) -> str:
        """Generate text from a prompt and one inline document."""
        logger.debug(
            f"Calling {self.model} with {len(document_data)} bytes of {mime_type}"
        )
        contents = [
            prompt,
            {"mime_type": mime_type, "data": document_data},
        ]

        try:
            model_instance = self.client.GenerativeModel(
                model_name=self.model,
                generation_config={
                    "response_mime_type": "application/json",
                },
            )
            response = await asyncio.wait_for(
                asyncio.to_thread(model_instance.generate_content, contents),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise TransientGenerationError(
                f"Gemini request timed out after {self.timeout}s"
            ) from e
        except GenerationError:
            raise
        except Exception as e:
            raise _wrap_google_error(e) from e

        return self._extract_text(response)

    def _extract_text(self, response: Any) -> str:
        """Safely extract text from a response, handling empty/blocked replies."""
        if not response.candidates:
            logger.warning("No candidates in Gemini response")
            return ""
        candidate = response.candidates[0]
        finish_reason = getattr(candidate, "finish_reason", None)
        if finish_reason and finish_reason != _FINISH_REASON_STOP:
            logger.warning(f"Gemini response finished with reason {finish_reason}")
        if not candidate.content or not candidate.content.parts:
            logger.warning(
                f"No content parts in Gemini response (finish_reason={finish_reason})"
            )
            return ""
        return "".join(
            part.text for part in candidate.content.parts if hasattr(part, "text")
        )
