"""Tests for common.models module."""

from datetime import datetime, timezone

from common.models import Article


class TestArticle:
    def test_defaults(self) -> None:
        article = Article(
            title="T",
            description="D",
            link="https://example.com",
            content="C",
            published=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )
        assert article.categories == []
        assert article.summary == ""
        assert article.category_relevance == []

    def test_snippet_truncates_content(self) -> None:
        article = Article(
            title="Title",
            description="Desc",
            link="https://example.com",
            content="x" * 300,
            published=datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc),
            categories=["Malware"],
        )

        snippet = article.snippet(size=10)

        assert f"Content (snippet and size): {'x' * 10}... (300)" in snippet
        assert "Published: 2024-01-01T12:00:00+00:00" in snippet
        assert "Categories: ['Malware']" in snippet
