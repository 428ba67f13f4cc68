"""Tests for LLM provider adapters."""

from unittest.mock import MagicMock

import pytest

from llm import FallbackProvider, LLMAuthError, LLMError, LLMRateLimitError
from llm.providers.claude import ClaudeProvider
from llm.providers.openai import OpenAIProvider
from llm.providers.together import TogetherProvider


def _openai_client(content="response"):
    mock_client = MagicMock()
    mock_resp = MagicMock()
    mock_resp.choices = [MagicMock(message=MagicMock(content=content))]
    mock_client.chat.completions.create.return_value = mock_resp
    return mock_client


class TestClaudeProvider:
    def test_generate(self):
        mock_client = MagicMock()
        mock_resp = MagicMock()
        mock_resp.content = [MagicMock(text="Hello from Claude")]
        mock_client.messages.create.return_value = mock_resp

        provider = ClaudeProvider(client=mock_client)
        result = provider.generate(
            messages=[{"role": "user", "content": "hi"}],
            system="Be helpful",
            max_tokens=100,
        )

        assert result == "Hello from Claude"
        mock_client.messages.create.assert_called_once_with(
            model="claude-haiku-4-5",
            max_tokens=100,
            temperature=0.7,
            messages=[{"role": "user", "content": "hi"}],
            system="Be helpful",
        )

    def test_generate_no_system(self):
        mock_client = MagicMock()
        mock_resp = MagicMock()
        mock_resp.content = [MagicMock(text="response")]
        mock_client.messages.create.return_value = mock_resp

        provider = ClaudeProvider(client=mock_client)
        provider.generate(messages=[{"role": "user", "content": "hi"}])

        call_kwargs = mock_client.messages.create.call_args.kwargs
        assert "system" not in call_kwargs

    def test_system_role_messages_folded_into_system(self):
        mock_client = MagicMock()
        mock_client.messages.create.return_value = MagicMock(content=[MagicMock(text="ok")])

        provider = ClaudeProvider(client=mock_client)
        provider.generate(
            messages=[
                {"role": "system", "content": "Prefer mornings"},
                {"role": "user", "content": "hi"},
            ],
            system="Be helpful",
        )

        call_kwargs = mock_client.messages.create.call_args.kwargs
        assert call_kwargs["messages"] == [{"role": "user", "content": "hi"}]
        assert call_kwargs["system"] == "Be helpful\n\nPrefer mornings"

    def test_multiple_text_blocks_joined(self):
        mock_client = MagicMock()
        mock_client.messages.create.return_value = MagicMock(
            content=[MagicMock(text="Study "), MagicMock(text="at 9 AM")]
        )

        provider = ClaudeProvider(client=mock_client)
        assert provider.generate(messages=[{"role": "user", "content": "hi"}]) == "Study at 9 AM"

    def test_auth_error(self):
        from anthropic import AuthenticationError

        mock_client = MagicMock()
        mock_client.messages.create.side_effect = AuthenticationError(
            message="bad key", response=MagicMock(status_code=401), body={}
        )

        provider = ClaudeProvider(client=mock_client)
        with pytest.raises(LLMAuthError):
            provider.generate(messages=[{"role": "user", "content": "hi"}])

    def test_rate_limit_error(self):
        from anthropic import RateLimitError

        mock_client = MagicMock()
        mock_client.messages.create.side_effect = RateLimitError(
            message="rate limited", response=MagicMock(status_code=429), body={}
        )

        provider = ClaudeProvider(client=mock_client)
        with pytest.raises(LLMRateLimitError):
            provider.generate(messages=[{"role": "user", "content": "hi"}])

    def test_generic_error(self):
        mock_client = MagicMock()
        mock_client.messages.create.side_effect = RuntimeError("something broke")

        provider = ClaudeProvider(client=mock_client)
        with pytest.raises(LLMError):
            provider.generate(messages=[{"role": "user", "content": "hi"}])


class TestOpenAIProvider:
    def test_generate(self):
        mock_client = _openai_client("Hello from GPT")

        provider = OpenAIProvider(client=mock_client)
        result = provider.generate(
            messages=[{"role": "user", "content": "hi"}],
            system="Be helpful",
        )

        assert result == "Hello from GPT"
        call_kwargs = mock_client.chat.completions.create.call_args.kwargs
        # System message should be prepended
        assert call_kwargs["messages"][0] == {"role": "system", "content": "Be helpful"}
        assert call_kwargs["messages"][1] == {"role": "user", "content": "hi"}
        assert call_kwargs["model"] == "gpt-4o-mini"

    def test_generate_no_system(self):
        mock_client = _openai_client()

        provider = OpenAIProvider(client=mock_client)
        provider.generate(messages=[{"role": "user", "content": "hi"}])

        call_kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert len(call_kwargs["messages"]) == 1  # No system prepended

    def test_none_content_becomes_empty(self):
        provider = OpenAIProvider(client=_openai_client(None))
        assert provider.generate(messages=[{"role": "user", "content": "hi"}]) == ""

    def test_generic_error(self):
        mock_client = MagicMock()
        mock_client.chat.completions.create.side_effect = RuntimeError("boom")

        provider = OpenAIProvider(client=mock_client)
        with pytest.raises(LLMError, match="openai error"):
            provider.generate(messages=[{"role": "user", "content": "hi"}])


class TestTogetherProvider:
    def test_uses_llama_default(self):
        mock_client = _openai_client("Hello from Llama")

        provider = TogetherProvider(client=mock_client)
        result = provider.generate(messages=[{"role": "user", "content": "hi"}])

        assert result == "Hello from Llama"
        call_kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert call_kwargs["model"] == "meta-llama/Llama-3.3-70B-Instruct-Turbo"
        assert provider.display_name == "together:meta-llama/Llama-3.3-70B-Instruct-Turbo"

    def test_error_labelled_together(self):
        mock_client = MagicMock()
        mock_client.chat.completions.create.side_effect = RuntimeError("down")

        provider = TogetherProvider(client=mock_client)
        with pytest.raises(LLMError, match="together error"):
            provider.generate(messages=[{"role": "user", "content": "hi"}])


class TestFallbackProvider:
    def _failing(self, name="openai"):
        p = MagicMock()
        p.provider_name = name
        p.generate.side_effect = LLMError("down")
        return p

    def test_first_success_wins(self):
        first = OpenAIProvider(client=_openai_client("from openai"))
        second = TogetherProvider(client=_openai_client("from together"))

        provider = FallbackProvider([first, second])
        assert provider.generate([{"role": "user", "content": "hi"}]) == "from openai"
        assert provider.last_provider is first
        second.client.chat.completions.create.assert_not_called()

    def test_falls_through_to_next(self):
        second = TogetherProvider(client=_openai_client("from together"))

        provider = FallbackProvider([self._failing(), second])
        assert provider.generate([{"role": "user", "content": "hi"}]) == "from together"
        assert provider.last_provider is second
        assert provider.display_name.startswith("together:")

    def test_all_fail(self):
        provider = FallbackProvider([self._failing("openai"), self._failing("together")])
        with pytest.raises(LLMError, match="All AI providers are currently unavailable"):
            provider.generate([{"role": "user", "content": "hi"}])

    def test_all_rate_limited_is_retryable(self):
        throttled = [self._failing("openai"), self._failing("together")]
        for p in throttled:
            p.generate.side_effect = LLMRateLimitError("429")

        provider = FallbackProvider(throttled)
        with pytest.raises(LLMRateLimitError, match="rate limited"):
            provider.generate([{"role": "user", "content": "hi"}])

    def test_mixed_failures_not_rate_limit(self):
        throttled = self._failing("openai")
        throttled.generate.side_effect = LLMRateLimitError("429")

        provider = FallbackProvider([throttled, self._failing("together")])
        with pytest.raises(LLMError) as exc:
            provider.generate([{"role": "user", "content": "hi"}])
        assert not isinstance(exc.value, LLMRateLimitError)

    def test_empty_list_rejected(self):
        with pytest.raises(LLMError):
            FallbackProvider([])
