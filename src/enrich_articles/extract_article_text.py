import logging
from typing import Optional, Union

import trafilatura
from lxml import html as lxml_html
from readability import Document

logger = logging.getLogger(__name__)


def extract_article_text(html: Union[str, bytes], url: str) -> Optional[str]:
    """
    Extract the readable body text from an article page.

    Order:
    1. readability-lxml
    2. trafilatura

    Each tried once. If both fail -> returns None.
    """

    # 1. Try readability
    try:
        text = extract_with_readability(html, url)
        if text:
            return text
    except Exception as e:
        logger.warning("readability failed for %s: %s", url, e)

    # 2. Fallback to trafilatura
    try:
        text = extract_with_trafilatura(html, url)
        if text:
            return text
    except Exception as e:
        logger.warning("trafilatura failed for %s: %s", url, e)

    # Both methods failed
    return None


def extract_with_readability(html: Union[str, bytes], url: str) -> Optional[str]:
    doc = Document(html, url=url)
    summary_html = doc.summary()

    tree = lxml_html.fromstring(summary_html)
    text = tree.text_content()

    lines = [line.strip() for line in text.splitlines() if line.strip()]
    return "\n".join(lines) if lines else None


def extract_with_trafilatura(html: Union[str, bytes], url: str) -> Optional[str]:
    return trafilatura.extract(html, url=url)
