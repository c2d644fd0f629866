"""Best-effort recovery of article body text."""

import logging
from dataclasses import replace

import requests

from common.models import Article
from common.text import clean_text
from enrich_articles.extract_article_text import extract_article_text
from enrich_articles.fetch_article_html import DEFAULT_TIMEOUT, fetch_article_html

logger = logging.getLogger(__name__)

# A description longer than this isn't a summary and won't help classification
MAX_DESCRIPTION_LENGTH = 1000

# Feed content shorter than this is a teaser, not the article
MIN_CONTENT_LENGTH = 200


def clean_feed_fields(article: Article) -> Article:
    """Drop feed-supplied description/content that is unlikely to be useful.

    An empty content falls back to the description for the checks below,
    so a long description is kept as the body while a short one is dropped.
    """
    description = article.description
    content = article.content or description

    if len(description) > MAX_DESCRIPTION_LENGTH:
        description = ""

    if clean_text(content) == clean_text(description) or len(content) < MIN_CONTENT_LENGTH:
        content = ""

    return replace(article, description=description, content=content)


def needs_fetch(article: Article, always_fetch: bool = False) -> bool:
    return always_fetch or not article.content


def enrich_article(
    article: Article,
    always_fetch: bool = False,
    timeout: float = DEFAULT_TIMEOUT,
) -> Article:
    """Clean the feed fields and, if no usable content is left, fetch the page and extract its text.

    Never raises on fetch or extraction failures: the article is returned
    with whatever content it has.
    """
    article = clean_feed_fields(article)
    if not needs_fetch(article, always_fetch):
        return article

    try:
        html = fetch_article_html(article.link, timeout=timeout)
    except requests.RequestException as e:
        logger.warning("Failed to enrich article %s: %s", article.link, e)
        return article

    text = extract_article_text(html, article.link)
    if not text:
        logger.warning("Failed to extract text content from %s (zero content)", article.link)
        return article

    return replace(article, content=text)
