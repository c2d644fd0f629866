"""Tests for llm_client.client module."""

from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from common.models import Article
from llm_client.base import LLMError
from llm_client.client import LLMClient
from llm_client.instructions import SUMMARIZE_ARTICLE_INSTRUCTIONS


def _fake_embed(model, texts):
    # One-dimensional vector holding each text's length
    return [[float(len(t))] for t in texts]


def _article(content: str = "Body text") -> Article:
    return Article(
        title="Big breach",
        description="",
        link="https://example.com/a",
        content=content,
        published=datetime(2024, 1, 1, tzinfo=timezone.utc),
        categories=["Malware", "Breach"],
    )


class TestChatCompletion:
    def test_passes_through_to_provider(self) -> None:
        provider = Mock()
        provider.chat_completion.return_value = "answer"
        client = LLMClient(provider)

        result = client.chat_completion("m", "sys", "user", 0.0, 100, require_json=True)

        assert result == "answer"
        provider.chat_completion.assert_called_once_with("m", "sys", "user", 0.0, 100, True)

    def test_propagates_provider_errors(self) -> None:
        provider = Mock()
        provider.chat_completion.side_effect = LLMError("down")

        with pytest.raises(LLMError, match="down"):
            LLMClient(provider).chat_completion("m", "sys", "user", 0.0, 100)


class TestCreateEmbeddings:
    def test_short_texts_in_one_request(self) -> None:
        provider = Mock()
        provider.create_embeddings.side_effect = _fake_embed
        client = LLMClient(provider, max_text_length=10)

        result = client.create_embeddings("emb", ["abc", "de"])

        assert result == [[3.0], [2.0]]
        provider.create_embeddings.assert_called_once_with("emb", ["abc", "de"])

    def test_long_text_is_chunked_and_averaged(self) -> None:
        provider = Mock()
        provider.create_embeddings.side_effect = _fake_embed
        client = LLMClient(provider, max_text_length=5, chunk_size=4, overlap=2)

        # "abcdefgh" -> "abcd", "cdef", "efgh", "gh"
        result = client.create_embeddings("emb", ["abc", "abcdefgh"])

        assert result[0] == [3.0]
        assert result[1] == pytest.approx([(4 + 4 + 4 + 2) / 4])
        provider.create_embeddings.assert_any_call("emb", ["abcd", "cdef", "efgh", "gh"])

    def test_single_chunk_matches_direct_embedding(self) -> None:
        provider = Mock()
        provider.create_embeddings.side_effect = lambda model, texts: [[0.25, -0.5, float(len(t))] for t in texts]
        direct = LLMClient(provider, max_text_length=100)
        # Over the limit, but one chunk covers the whole text
        chunked = LLMClient(provider, max_text_length=3, chunk_size=10, overlap=0)

        assert chunked.create_embeddings("emb", ["abcdef"]) == direct.create_embeddings("emb", ["abcdef"])

    def test_preserves_input_order(self) -> None:
        provider = Mock()
        provider.create_embeddings.side_effect = _fake_embed
        client = LLMClient(provider, max_text_length=3, chunk_size=2, overlap=0)

        result = client.create_embeddings("emb", ["abcd", "a", "ab"])

        assert result == [[2.0], [1.0], [2.0]]

    def test_count_mismatch_raises(self) -> None:
        provider = Mock()
        provider.create_embeddings.return_value = [[1.0]]

        with pytest.raises(LLMError, match="does not match"):
            LLMClient(provider).create_embeddings("emb", ["a", "b"])

    def test_inconsistent_chunk_dimensions_raise(self) -> None:
        provider = Mock()
        provider.create_embeddings.return_value = [[1.0, 2.0], [1.0]]
        client = LLMClient(provider, max_text_length=2, chunk_size=2, overlap=0)

        with pytest.raises(LLMError, match="Failed to combine"):
            client.create_embeddings("emb", ["abcd"])

    def test_empty_input(self) -> None:
        provider = Mock()
        assert LLMClient(provider).create_embeddings("emb", []) == []
        provider.create_embeddings.assert_not_called()


class TestSummarize:
    def test_builds_prompt_from_article(self) -> None:
        provider = Mock()
        provider.chat_completion.return_value = "- point"
        client = LLMClient(provider, summary_model="gpt-4o")

        assert client.summarize(_article()) == "- point"

        model, system_prompt, user_prompt, temperature, max_tokens, require_json = (
            provider.chat_completion.call_args[0]
        )
        assert model == "gpt-4o"
        assert system_prompt == SUMMARIZE_ARTICLE_INSTRUCTIONS
        assert user_prompt == "Title: Big breach\nContent: Body text\nCategories: Malware, Breach"
        assert temperature == 0.5
        assert max_tokens == 500
        assert require_json is False

    def test_truncates_long_content(self) -> None:
        provider = Mock()
        provider.chat_completion.return_value = "ok"
        client = LLMClient(provider)

        client.summarize(_article(content="word " * 3000))

        user_prompt = provider.chat_completion.call_args[0][2]
        content_line = user_prompt.split("\n")[1]
        assert len(content_line.removeprefix("Content: ").split()) == 1500


class TestTotalCost:
    def test_delegates_to_provider(self) -> None:
        provider = Mock()
        provider.total_cost.return_value = 0.42
        assert LLMClient(provider).total_cost() == 0.42
