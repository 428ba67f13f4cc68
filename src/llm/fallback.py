"""Ordered fallback across providers."""

import structlog

from .base import LLMError, LLMProvider, LLMRateLimitError

logger = structlog.get_logger()


class FallbackProvider(LLMProvider):
    """Try each provider in order; the first success wins.

    ``last_provider`` names the provider that produced the latest answer.
    """

    provider_name = "fallback"

    def __init__(self, providers: list[LLMProvider]):
        if not providers:
            raise LLMError("FallbackProvider needs at least one provider")
        self.providers = providers
        self.model = providers[0].model
        self.last_provider: LLMProvider | None = None

    @property
    def display_name(self) -> str:
        active = self.last_provider or self.providers[0]
        return active.display_name

    def generate(
        self,
        messages: list[dict],
        system: str | None = None,
        max_tokens: int = 1000,
        temperature: float = 0.7,
    ) -> str:
        errors: list[str] = []
        rate_limited = 0
        for provider in self.providers:
            try:
                text = provider.generate(
                    messages, system=system, max_tokens=max_tokens, temperature=temperature
                )
            except LLMError as e:
                logger.warning(
                    "llm.provider_failed",
                    provider=provider.provider_name,
                    error=str(e),
                )
                errors.append(f"{provider.provider_name}: {e}")
                if isinstance(e, LLMRateLimitError):
                    rate_limited += 1
                continue
            self.last_provider = provider
            return text

        detail = "; ".join(errors)
        # Retryable only when every provider was throttled
        if rate_limited == len(self.providers):
            raise LLMRateLimitError("All AI providers are rate limited. " + detail)
        raise LLMError("All AI providers are currently unavailable. " + detail)
