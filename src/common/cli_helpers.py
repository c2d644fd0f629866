"""Common CLI helper utilities."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def setup_logging(verbose: bool = False, log_file: str | None = None) -> None:
    """Configure standard logging format for CLI tools.

    Args:
        verbose: Log at DEBUG instead of INFO.
        log_file: Optional path; log records are appended there as well as to stderr.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="a", encoding="utf-8"))

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )

    # Third-party HTTP clients are chatty at DEBUG
    for name in ("urllib3", "httpx", "httpcore", "openai", "trafilatura", "readability"):
        logging.getLogger(name).setLevel(logging.WARNING)
