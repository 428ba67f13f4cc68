"""OpenAI LLM provider."""

from ..base import LLMAuthError, LLMError, LLMProvider, LLMRateLimitError


def _handle_openai_error(e: Exception, label: str = "openai"):
    from openai import APIError, AuthenticationError, RateLimitError

    if isinstance(e, AuthenticationError):
        raise LLMAuthError(f"{label} auth failed: {e}") from e
    if isinstance(e, RateLimitError):
        raise LLMRateLimitError(f"{label} rate limit: {e}") from e
    if isinstance(e, APIError):
        raise LLMError(f"{label} API error: {e}") from e
    raise LLMError(f"{label} error: {e}") from e


class OpenAIProvider(LLMProvider):
    """OpenAI chat-completions provider."""

    provider_name = "openai"
    default_model = "gpt-4o-mini"
    base_url: str | None = None

    def __init__(self, api_key: str | None = None, model: str | None = None, client=None):
        self.model = model or self.default_model

        if client:
            self.client = client
            return

        try:
            from openai import OpenAI
        except ImportError:
            raise LLMError("openai package not installed. Run: pip install openai")

        if self.base_url:
            self.client = OpenAI(api_key=api_key, base_url=self.base_url)
        else:
            self.client = OpenAI(api_key=api_key)

    def generate(
        self,
        messages: list[dict],
        system: str | None = None,
        max_tokens: int = 1000,
        temperature: float = 0.7,
    ) -> str:
        full_messages = []
        if system:
            full_messages.append({"role": "system", "content": system})
        full_messages.extend(messages)

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                max_tokens=max_tokens,
                temperature=temperature,
                messages=full_messages,
            )
            return response.choices[0].message.content or ""
        except Exception as e:
            _handle_openai_error(e, label=self.provider_name)
