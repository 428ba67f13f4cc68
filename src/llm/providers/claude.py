"""Anthropic Claude provider."""

import anthropic

from ..base import LLMAuthError, LLMError, LLMProvider, LLMRateLimitError

DEFAULT_MODEL = "claude-haiku-4-5"


def _map_error(e: Exception) -> LLMError:
    if isinstance(e, anthropic.AuthenticationError):
        return LLMAuthError(f"Claude auth failed: {e}")
    if isinstance(e, anthropic.RateLimitError):
        return LLMRateLimitError(f"Claude rate limit: {e}")
    if isinstance(e, anthropic.APIError):
        return LLMError(f"Claude API error: {e}")
    return LLMError(f"Claude error: {e}")


def split_system(messages: list[dict], system: str | None) -> tuple[str | None, list[dict]]:
    """Anthropic takes the system prompt as a parameter.

    System-role messages in the history are folded into it, after ``system``.
    """
    parts = [system] if system else []
    convo = []
    for m in messages:
        if m.get("role") == "system":
            if m.get("content"):
                parts.append(m["content"])
        else:
            convo.append(m)
    return ("\n\n".join(parts) or None), convo


class ClaudeProvider(LLMProvider):
    provider_name = "claude"

    def __init__(self, api_key: str | None = None, model: str | None = None, client=None):
        self.model = model or DEFAULT_MODEL
        self.client = client or anthropic.Anthropic(api_key=api_key)

    def generate(
        self,
        messages: list[dict],
        system: str | None = None,
        max_tokens: int = 1000,
        temperature: float = 0.7,
    ) -> str:
        system_prompt, convo = split_system(messages, system)
        kwargs = {
            "model": self.model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": convo,
        }
        if system_prompt:
            kwargs["system"] = system_prompt

        try:
            response = self.client.messages.create(**kwargs)
        except Exception as e:
            raise _map_error(e) from e
        # Non-text blocks carry no text
        return "".join(getattr(b, "text", "") for b in response.content)
