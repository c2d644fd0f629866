"""CLI for running the secfeed pipeline."""

from __future__ import annotations

import logging
import queue
import sys
from datetime import timedelta
from functools import partial

from dotenv import load_dotenv

from classify_articles.classify_articles import build_classification_engine
from common.cli_helpers import setup_logging
from common.config import ConfigError, load_config
from common.signals import setup_signal_handler
from enrich_articles.enrich import enrich_article
from fetch_feeds.feed_fetcher import FeedFetcher
from llm_client.base import LLMError
from llm_client.client import LLMClient
from llm_client.helpers import build_provider
from report_articles.slack import SlackReporter
from run_secfeed.helpers import parse_run_args
from run_secfeed.pipeline import consume_articles, process_article

load_dotenv()

logger = logging.getLogger(__name__)

SHUTDOWN_TIMEOUT_SECONDS = 10


def run(config_path: str) -> None:
    """Start the feed fetcher and process articles until interrupted."""
    logger.info("Starting secfeed!")

    config = load_config(config_path)
    logger.info(
        "Loaded %d feeds and %d categories (engine=%s, client=%s)",
        len(config.rss_feed),
        len(config.categories),
        config.llm.classification.engine,
        config.llm.client,
    )

    stop_event = setup_signal_handler()

    fetcher = FeedFetcher(
        config.rss_feed,
        init_pull=timedelta(days=config.init_pull),
        poll_interval=timedelta(minutes=config.poll_interval_minutes),
        enrich=partial(
            enrich_article,
            always_fetch=config.enrich.always_fetch,
            timeout=config.enrich.request_timeout,
        ),
    )

    client = LLMClient(build_provider(config.llm), summary_model=config.llm.summary.model)
    engine = build_classification_engine(config.llm.classification, client, config.categories)
    slack = SlackReporter.from_env() if config.reporting.slack else None

    articles: queue.Queue = queue.Queue(maxsize=config.queue_size)
    fetcher_thread = fetcher.start(articles, stop_event)

    handled = consume_articles(
        articles,
        stop_event,
        partial(process_article, engine=engine, client=client, reporting=config.reporting, slack=slack),
    )

    fetcher_thread.join(timeout=SHUTDOWN_TIMEOUT_SECONDS)
    logger.info(
        "Shutting down secfeed. Processed %d articles, approximate LLM cost $%.4f",
        handled,
        client.total_cost(),
    )


def main() -> None:
    args = parse_run_args()
    setup_logging(verbose=args.verbose, log_file=args.log_file)

    try:
        run(args.config)
    except (ConfigError, LLMError, ValueError) as e:
        logger.error("Failed to start secfeed: %s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
