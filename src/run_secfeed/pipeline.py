"""Per-article processing and the consumer loop."""

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import replace
from typing import Any, Callable

import requests

from classify_articles.classify_articles import ClassificationEngine
from common.config import ReportingConfig
from common.models import Article
from llm_client.base import LLMError
from llm_client.client import LLMClient
from report_articles.formatting import format_as_slack_mrkdwn
from report_articles.slack import SlackReporter
from report_articles.stdout import print_summary

logger = logging.getLogger(__name__)

# How often a blocked receive re-checks for cancellation
GET_TIMEOUT_SECONDS = 0.5


def process_article(
    article: Article,
    engine: ClassificationEngine,
    client: LLMClient,
    reporting: ReportingConfig,
    slack: SlackReporter | None = None,
) -> Article:
    """Classify an article and, if any category matched, summarize and report it.

    Classification and summarization errors propagate; reporting errors are logged.
    """
    logger.info("Received article. Analyzing... title=%s link=%s", article.title, article.link)
    logger.debug(article.snippet())

    matches = engine.classify(article)
    article = replace(article, category_relevance=matches)

    for match in matches:
        logger.info(
            "Category %s is similar with relevance %.1f (Explanation: %s) link=%s",
            match.category,
            match.relevance,
            match.explanation or "",
            article.link,
        )

    if not matches:
        return article

    article = replace(article, summary=client.summarize(article))

    if reporting.stdout:
        print_summary(article, reporting.debug)

    if slack is not None:
        try:
            slack.send(format_as_slack_mrkdwn(article, reporting.debug))
        except requests.RequestException as e:
            logger.error("Failed to send slack webhook for %s: %s", article.link, e)

    return article


def consume_articles(
    articles: queue.Queue,
    stop_event: threading.Event,
    handle: Callable[[Article], Any],
) -> int:
    """Process articles one at a time until cancellation. Returns the number handled.

    A failing article is logged and skipped; the loop never stops on errors.
    """
    handled = 0
    while not stop_event.is_set():
        try:
            article = articles.get(timeout=GET_TIMEOUT_SECONDS)
        except queue.Empty:
            continue

        try:
            handle(article)
        except LLMError as e:
            logger.error("Failed to process article %s: %s", article.link, e)
        except Exception:
            logger.exception("Unexpected error while processing article %s", article.link)
        finally:
            articles.task_done()
        handled += 1

    return handled
