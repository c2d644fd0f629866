"""Text normalization helpers."""

import html
import re
from typing import Optional


def clean_text(text: Optional[str]) -> str:
    """Clean text by stripping HTML, unescaping entities, and collapsing whitespace."""
    if not text:
        return ""
    # Strip HTML tags (keep text content)
    text = re.sub(r"<[^>]+>", " ", text)
    text = html.unescape(text)
    # Remove escaped quotes
    text = text.replace('\\"', '"')
    # Collapse whitespace
    return re.sub(r"\s+", " ", text).strip()
