"""Provider contract for chat completions and embeddings."""

from typing import Protocol


class LLMError(RuntimeError):
    """A provider call failed or returned something unusable."""


class EmbeddingsNotSupportedError(LLMError, NotImplementedError):
    """The provider has no embeddings endpoint."""


class LLMProvider(Protocol):
    def chat_completion(
        self,
        model: str,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_tokens: int,
        require_json: bool = False,
    ) -> str:
        """Return the assistant message text for a single-turn chat."""
        ...

    def create_embeddings(self, model: str, texts: list[str]) -> list[list[float]]:
        """Return one vector per input text, in input order."""
        ...

    def total_cost(self) -> float:
        """Approximate USD spent by this provider so far."""
        ...
