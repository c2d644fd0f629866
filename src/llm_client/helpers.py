"""Provider selection."""

from common.config import LLMConfig
from llm_client.base import LLMProvider
from llm_client.ollama_provider import OllamaProvider
from llm_client.openai_provider import OpenAIProvider


def build_provider(config: LLMConfig) -> LLMProvider:
    """Create the configured provider. Ollama models are loaded before returning."""
    if config.client == "openai":
        return OpenAIProvider()
    if config.client == "ollama":
        return OllamaProvider(models=config.models)
    raise ValueError(f"Unknown llm client: {config.client}")
