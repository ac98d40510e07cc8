"""Adaptadores de proveedor."""

from .base import ProviderAdapter, normalize_token_usage
from .gemini_adapter import GoogleGeminiAdapter
from .openai_adapter import OpenAIAdapter

__all__ = ["ProviderAdapter", "OpenAIAdapter", "GoogleGeminiAdapter", "normalize_token_usage"]
