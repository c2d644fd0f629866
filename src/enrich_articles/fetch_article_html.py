import logging

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5

# Some publishers refuse requests that don't look like they come from a browser
BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/90.0.4430.93 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Connection": "keep-alive",
}


def fetch_article_html(url: str, timeout: float = DEFAULT_TIMEOUT) -> bytes:
    """
    Fetch the raw HTML of an article page.

    Raises requests.RequestException on network errors and on any
    status other than 200.
    """
    response = requests.get(url, timeout=timeout, headers=BROWSER_HEADERS)
    if response.status_code != 200:
        raise requests.HTTPError(
            f"Failed to fetch {url} with status code: {response.status_code}",
            response=response,
        )
    return response.content
