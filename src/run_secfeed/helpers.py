"""Helper functions for the secfeed CLI."""

from __future__ import annotations

import argparse

from common.config import DEFAULT_CONFIG_PATH


def parse_run_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for secfeed."""

    parser = argparse.ArgumentParser(
        prog="secfeed",
        description="Fetch security feeds and report the articles relevant to your categories.",
    )
    parser.add_argument(
        "-c",
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help=f"Config file path (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("-l", "--log-file", default=None, help="Also append logs to this file")

    return parser.parse_args(argv)
