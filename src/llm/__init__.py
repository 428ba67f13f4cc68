"""Multi-provider LLM abstraction layer."""

from .base import LLMAuthError, LLMError, LLMProvider, LLMRateLimitError
from .factory import create_fallback_provider, create_llm_provider
from .fallback import FallbackProvider

__all__ = [
    "LLMProvider",
    "FallbackProvider",
    "create_llm_provider",
    "create_fallback_provider",
    "LLMError",
    "LLMRateLimitError",
    "LLMAuthError",
]
