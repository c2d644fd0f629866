"""Provider-independent LLM client."""

import logging

from common.models import Article
from llm_client.base import LLMError, LLMProvider
from llm_client.chunking import average_embeddings, chunk_text
from llm_client.instructions import SUMMARIZE_ARTICLE_INSTRUCTIONS

logger = logging.getLogger(__name__)

EMBEDDINGS_MAX_TEXT_LENGTH = 8000
EMBEDDINGS_CHUNK_SIZE = 1000
EMBEDDINGS_OVERLAP = 200

SUMMARY_MAX_TOKENS = 500
SUMMARY_TEMPERATURE = 0.5
SUMMARY_WORD_LIMIT = 1500


class LLMClient:
    """Chat completions and embeddings on top of a single provider.

    Texts longer than ``max_text_length`` characters are split into
    overlapping chunks before embedding, and the chunk vectors are averaged
    back into one vector per text.
    """

    def __init__(
        self,
        provider: LLMProvider,
        summary_model: str = "gpt-4o",
        max_text_length: int = EMBEDDINGS_MAX_TEXT_LENGTH,
        chunk_size: int = EMBEDDINGS_CHUNK_SIZE,
        overlap: int = EMBEDDINGS_OVERLAP,
    ) -> None:
        self.provider = provider
        self.summary_model = summary_model
        self.max_text_length = max_text_length
        self.chunk_size = chunk_size
        self.overlap = overlap

    def chat_completion(
        self,
        model: str,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_tokens: int,
        require_json: bool = False,
    ) -> str:
        return self.provider.chat_completion(
            model, system_prompt, user_prompt, temperature, max_tokens, require_json
        )

    def create_embeddings(self, model: str, texts: list[str]) -> list[list[float]]:
        """Embed each text, chunking and averaging the ones that are too long."""
        results: list[list[float] | None] = [None] * len(texts)

        # Texts within the limit go to the provider in a single request
        short = [i for i, text in enumerate(texts) if len(text) <= self.max_text_length]
        if short:
            vectors = self._embed(model, [texts[i] for i in short])
            for i, vector in zip(short, vectors):
                results[i] = vector

        for i, text in enumerate(texts):
            if results[i] is not None:
                continue
            chunks = chunk_text(text, self.chunk_size, self.overlap)
            logger.debug("Embedding text of %d characters as %d chunks", len(text), len(chunks))
            try:
                results[i] = average_embeddings(self._embed(model, chunks))
            except ValueError as e:
                raise LLMError(f"Failed to combine chunk embeddings: {e}") from e

        return results

    def _embed(self, model: str, texts: list[str]) -> list[list[float]]:
        vectors = self.provider.create_embeddings(model, texts)
        if len(vectors) != len(texts):
            raise LLMError(
                f"Number of embeddings returned ({len(vectors)}) does not match number of texts ({len(texts)})"
            )
        return vectors

    def summarize(self, article: Article) -> str:
        words = article.content.split()
        content = " ".join(words[:SUMMARY_WORD_LIMIT])
        user_prompt = f"Title: {article.title}\nContent: {content}\nCategories: {', '.join(article.categories)}"

        return self.chat_completion(
            self.summary_model,
            SUMMARIZE_ARTICLE_INSTRUCTIONS,
            user_prompt,
            temperature=SUMMARY_TEMPERATURE,
            max_tokens=SUMMARY_MAX_TOKENS,
        )

    def total_cost(self) -> float:
        return self.provider.total_cost()
