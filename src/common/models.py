"""Data models shared by every pipeline stage."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class CategoryRelevance:
    """Relevance of one configured category to an article (0 = unrelated, 10 = highly relevant)."""
    category: str
    relevance: float
    explanation: Optional[str] = None


@dataclass
class Article:
    """Feed entry as it moves through fetch, enrichment, classification and reporting."""
    title: str
    description: str
    link: str
    content: str
    published: datetime
    categories: list[str] = field(default_factory=list)

    # Filled in by later stages
    summary: str = ""
    category_relevance: list[CategoryRelevance] = field(default_factory=list)

    def snippet(self, size: int = 100) -> str:
        """Short multi-line description of the article for debug logging."""
        return (
            f"Article: {self.title}\n"
            f"Description: {self.description}\n"
            f"Content (snippet and size): {self.content[:size]}... ({len(self.content)})\n"
            f"Link: {self.link}\n"
            f"Published: {self.published.isoformat()}\n"
            f"Categories: {self.categories}\n"
        )
