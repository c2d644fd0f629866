from __future__ import annotations

from rich.console import Console
from rich.markdown import Markdown

from common.models import Article
from report_articles.formatting import format_as_markdown

WORD_WRAP = 80


def print_summary(article: Article, debug: bool = False, console: Console | None = None) -> None:
    """Render the article summary as Markdown in the terminal."""
    console = console or Console(width=WORD_WRAP)
    console.print(Markdown(format_as_markdown(article, debug)))
