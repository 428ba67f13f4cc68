"""LLM provider factory with auto-detection."""

import os

from .base import LLMError, LLMProvider
from .fallback import FallbackProvider


def _openai(**kwargs) -> LLMProvider:
    from .providers.openai import OpenAIProvider

    return OpenAIProvider(**kwargs)


def _together(**kwargs) -> LLMProvider:
    from .providers.together import TogetherProvider

    return TogetherProvider(**kwargs)


def _claude(**kwargs) -> LLMProvider:
    from .providers.claude import ClaudeProvider

    return ClaudeProvider(**kwargs)


# name -> (API key env var, constructor); dict order is the auto-detect preference
PROVIDERS = {
    "openai": ("OPENAI_API_KEY", _openai),
    "together": ("TOGETHER_API_KEY", _together),
    "claude": ("ANTHROPIC_API_KEY", _claude),
}


def _key_vars() -> str:
    return ", ".join(env for env, _ in PROVIDERS.values())


def create_llm_provider(
    provider: str | None = None,
    api_key: str | None = None,
    model: str | None = None,
    client=None,
) -> LLMProvider:
    """Create an LLM provider instance.

    Args:
        provider: "openai", "together", "claude", "fallback", "auto", or None (auto-detect)
        api_key: Explicit API key (overrides env var)
        model: Model name (None = provider default)
        client: Pre-built SDK client for testing/DI
    """
    name = provider or "auto"
    if name == "auto":
        name = _auto_detect_provider(api_key)
    if name == "fallback":
        return create_fallback_provider()
    if name not in PROVIDERS:
        raise LLMError(f"Unknown provider: {name}. Use: {', '.join(PROVIDERS)}, fallback")

    env_var, build = PROVIDERS[name]
    if not api_key and not client:
        api_key = os.getenv(env_var)
    return build(api_key=api_key, model=model, client=client)


def create_fallback_provider(order: list[str] | None = None) -> FallbackProvider:
    """Chain every provider whose API key is set, in preference order."""
    names = [n for n in (order or PROVIDERS) if os.getenv(PROVIDERS[n][0])]
    if not names:
        raise LLMError(f"No AI API keys configured. Set one of: {_key_vars()}")
    return FallbackProvider([create_llm_provider(provider=n) for n in names])


def _detect_provider_from_key(api_key: str) -> str | None:
    """Infer provider from API key prefix. Together keys have no fixed prefix."""
    if api_key.startswith("sk-ant-"):
        return "claude"
    if api_key.startswith("sk-"):
        return "openai"
    return None


def _auto_detect_provider(api_key: str | None = None) -> str:
    """Explicit key prefix first, then the first provider with its env var set."""
    if api_key:
        inferred = _detect_provider_from_key(api_key)
        if inferred:
            return inferred
    for name, (env_var, _) in PROVIDERS.items():
        if os.getenv(env_var):
            return name
    raise LLMError(f"No LLM API key found. Set one of: {_key_vars()}")
