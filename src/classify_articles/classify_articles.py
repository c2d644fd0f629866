"""Core article classification logic."""

from __future__ import annotations

import json
import logging
from typing import Any, Sequence, Union

import numpy as np

from classify_articles.instructions import CLASSIFY_ARTICLE_INSTRUCTIONS
from common.config import Category, ClassificationConfig
from common.models import Article, CategoryRelevance
from common.text import clean_text
from llm_client.base import LLMError
from llm_client.client import LLMClient

logger = logging.getLogger(__name__)

CLASSIFICATION_MAX_TOKENS = 2000
CLASSIFICATION_TEMPERATURE = 0.0

# Characters of article content sent to the classifier
PROMPT_CONTENT_LIMIT = 8000
EMBEDDING_CONTENT_LIMIT = 4000

# Similarity for vectors that can't be compared; fails any non-negative threshold
INVALID_SIMILARITY = -1.0


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity between two vectors, or -1 if their lengths differ."""
    if len(a) != len(b):
        # Should not happen for embeddings from the same model
        return INVALID_SIMILARITY
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    norm_a = np.linalg.norm(a)
    norm_b = np.linalg.norm(b)
    if norm_a == 0 or norm_b == 0:
        return 0.0
    # Rounding can push identical vectors just past 1
    return float(np.clip(np.dot(a, b) / (norm_a * norm_b), -1.0, 1.0))


def similarity_to_relevance(similarity: float) -> float:
    """Map cosine similarity onto the 0-10 relevance scale."""
    return similarity * 10


def filter_by_threshold(matches: list[CategoryRelevance], threshold: float) -> list[CategoryRelevance]:
    return [match for match in matches if match.relevance >= threshold]


def build_classification_prompt(categories: Sequence[Category]) -> str:
    lines = [CLASSIFY_ARTICLE_INSTRUCTIONS.strip()]
    for i, category in enumerate(categories, 1):
        lines.append(f"{i}. {category.name}: {category.description}")
    return "\n".join(lines) + "\n"


def build_article_prompt(article: Article) -> str:
    return (
        "Below is the article to evaluate:\n\n"
        f"Title: {article.title}\n"
        f"Description: {article.description}\n"
        f"Link: {article.link}\n"
        f"Content: {article.content[:PROMPT_CONTENT_LIMIT]}\n"
    )


def parse_relevance_response(content: str) -> list[CategoryRelevance]:
    """Parse the classifier's JSON answer.

    Accepts a bare array, an object wrapping the array, or a single
    relevance object. Anything else raises LLMError; no partial results.
    """
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise LLMError(f"Failed to unmarshal relevance scores: {e}") from e

    if isinstance(data, dict):
        if "category" in data:
            data = [data]
        else:
            data = next((value for value in data.values() if isinstance(value, list)), None)

    if not isinstance(data, list):
        raise LLMError(f"Expected a JSON array of relevance scores, got: {content[:200]}")

    return [_parse_relevance_item(item) for item in data]


def _parse_relevance_item(item: Any) -> CategoryRelevance:
    if not isinstance(item, dict) or "category" not in item or "relevance" not in item:
        raise LLMError(f"Invalid relevance entry: {item}")
    try:
        relevance = float(item["relevance"])
    except (TypeError, ValueError) as e:
        raise LLMError(f"Invalid relevance value: {item['relevance']!r}") from e
    return CategoryRelevance(
        category=str(item["category"]),
        relevance=relevance,
        explanation=item.get("explanation") or None,
    )


def build_article_embedding_text(article: Article) -> str:
    """Lower-cased title, description and truncated content with markup removed."""
    parts = [article.title, article.description, article.content[:EMBEDDING_CONTENT_LIMIT]]
    return clean_text(" ".join(part for part in parts if part)).lower()


def encode_categories(
    client: LLMClient,
    model: str,
    categories: Sequence[Category],
) -> dict[str, list[float]]:
    """Embed every category name (lower-cased) once."""
    vectors = client.create_embeddings(model, [category.name.lower() for category in categories])
    return {category.name: vector for category, vector in zip(categories, vectors)}


class LLMClassifier:
    """Asks the chat model to score every category in a single call."""

    def __init__(
        self,
        client: LLMClient,
        categories: Sequence[Category],
        model: str,
        threshold: float,
    ) -> None:
        self.client = client
        self.categories = list(categories)
        self.model = model
        self.threshold = threshold
        self.system_prompt = build_classification_prompt(self.categories)

    def classify(self, article: Article) -> list[CategoryRelevance]:
        content = self.client.chat_completion(
            self.model,
            self.system_prompt,
            build_article_prompt(article),
            temperature=CLASSIFICATION_TEMPERATURE,
            max_tokens=CLASSIFICATION_MAX_TOKENS,
            require_json=True,
        )
        matches = parse_relevance_response(content)

        for match in matches:
            logger.debug("Category classified: category=%s relevance=%s", match.category, match.relevance)

        return filter_by_threshold(matches, self.threshold)


class EmbeddingsClassifier:
    """Scores categories by cosine similarity between the article and category-name embeddings."""

    def __init__(
        self,
        client: LLMClient,
        categories: Sequence[Category],
        model: str,
        threshold: float,
        encoded_categories: dict[str, list[float]] | None = None,
    ) -> None:
        self.client = client
        self.model = model
        self.threshold = threshold

        if encoded_categories is None:
            logger.info("Pre-encoding %d input categories", len(categories))
            encoded_categories = encode_categories(client, model, categories)
        self.encoded_categories = encoded_categories

    def classify(self, article: Article) -> list[CategoryRelevance]:
        [article_vector] = self.client.create_embeddings(self.model, [build_article_embedding_text(article)])

        matches = []
        for name, category_vector in self.encoded_categories.items():
            similarity = cosine_similarity(article_vector, category_vector)
            relevance = similarity_to_relevance(similarity)
            logger.debug("Category classified: category=%s sim=%.3f relevance=%.2f", name, similarity, relevance)
            matches.append(CategoryRelevance(category=name, relevance=relevance))

        return filter_by_threshold(matches, self.threshold)


ClassificationEngine = Union[LLMClassifier, EmbeddingsClassifier]


def build_classification_engine(
    config: ClassificationConfig,
    client: LLMClient,
    categories: Sequence[Category],
) -> ClassificationEngine:
    """Create the configured engine. The embeddings engine encodes categories up front."""
    if config.engine == "llm":
        return LLMClassifier(client, categories, config.model, config.threshold)
    if config.engine == "embeddings":
        return EmbeddingsClassifier(client, categories, config.model, config.threshold)
    raise ValueError(f"Unknown classification engine type: {config.engine}")
