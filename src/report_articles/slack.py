"""Slack incoming-webhook reporter."""

from __future__ import annotations

import logging
import os

import requests

logger = logging.getLogger(__name__)

ENV_SLACK_WEBHOOK_URL = "SLACK_WEBHOOK_URL"
REQUEST_TIMEOUT = 10


class SlackReporter:
    def __init__(self, webhook_url: str, session: requests.Session | None = None) -> None:
        self.webhook_url = webhook_url
        self.session = session or requests.Session()

    @classmethod
    def from_env(cls) -> SlackReporter:
        webhook_url = os.environ.get(ENV_SLACK_WEBHOOK_URL)
        if not webhook_url:
            raise ValueError(f"{ENV_SLACK_WEBHOOK_URL} environment variable is not set")
        return cls(webhook_url)

    def send(self, text: str) -> None:
        """Post a single mrkdwn section to the webhook. Raises on failure."""
        logger.debug("Sending webhook to Slack")
        payload = {
            "blocks": [
                {
                    "type": "section",
                    "text": {"type": "mrkdwn", "text": text},
                }
            ]
        }
        response = self.session.post(self.webhook_url, json=payload, timeout=REQUEST_TIMEOUT)
        if response.status_code != 200:
            raise requests.HTTPError(
                f"Slack webhook failed with status code {response.status_code}",
                response=response,
            )
