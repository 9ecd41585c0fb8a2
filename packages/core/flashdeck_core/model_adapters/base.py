"""Base model adapter interface."""

from abc import ABC, abstractmethod


class BaseModelAdapter(ABC):
    """Abstract base class for generative model adapters."""

    @abstractmethod
    async def generate_from_document(
        self,
        prompt: str,
        document_data: bytes,
        mime_type: str = "application/pdf",
    ) -> str:
        """Send a prompt plus one inline document and return the raw text reply.

        Args:
            prompt: Instruction text
            document_data: Raw bytes of the attached document
            mime_type: Media type of the attached document

        Returns:
            Raw model output text (may be empty)

        Raises:
            TransientGenerationError: For failures that may succeed on retry
            PermanentGenerationError: For failures that will not
        """
        pass
