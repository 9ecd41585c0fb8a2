"""Model adapters for generative AI backends."""

from flashdeck_core.model_adapters.base import BaseModelAdapter
from flashdeck_core.model_adapters.google import GoogleAdapter

__all__ = ["BaseModelAdapter", "GoogleAdapter"]
