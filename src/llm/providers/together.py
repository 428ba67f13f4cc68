"""Together.ai provider: OpenAI-compatible endpoint."""

from .openai import OpenAIProvider

TOGETHER_BASE_URL = "https://api.together.xyz/v1"


class TogetherProvider(OpenAIProvider):
    """Llama models served by Together through the OpenAI SDK."""

    provider_name = "together"
    default_model = "meta-llama/Llama-3.3-70B-Instruct-Turbo"
    base_url = TOGETHER_BASE_URL
