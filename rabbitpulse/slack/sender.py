"""Slack incoming webhook sender."""

import logging
from typing import Iterable

import requests

from ..core.notification import NotificationSettings, SlackMessage
from ..exceptions import SlackDeliveryError

logger = logging.getLogger(__name__)

_TIMEOUT = 10


class SlackSender:
    """
    Posts alert messages to a Slack incoming webhook.

    Delivery is not retried; failures are raised to the caller.
    """

    def __init__(
        self,
        webhook_url: str,
        dry_run: bool = False,
        timeout: float = _TIMEOUT,
    ):
        """
        Initialize the Slack sender.

        Args:
            webhook_url: Incoming webhook URL.
            dry_run: Print messages instead of posting them.
            timeout: Request timeout in seconds.
        """
        self.webhook_url = webhook_url
        self.dry_run = dry_run
        self.timeout = timeout

    def send(self, message: SlackMessage) -> None:
        """
        Post one message to the webhook.

        Args:
            message: Message to deliver.

        Raises:
            SlackDeliveryError: On transport failure or non-2xx status.
        """
        if self.dry_run:
            print(f"[DRY RUN] {message}")
            logger.info(f"Dry run: {message}")
            return

        try:
            resp = requests.post(
                self.webhook_url,
                json=message.to_payload(),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise SlackDeliveryError(f"Failed to post to Slack: {e}") from e

        if not 200 <= resp.status_code < 300:
            raise SlackDeliveryError(
                f"Slack webhook returned {resp.status_code}: {resp.text[:200]}"
            )

        logger.info(f"Sent alert to {message.channel}: {message.text}")

    def send_many(self, messages: Iterable[SlackMessage]) -> int:
        """
        Post messages in order, stopping at the first failure.

        The raised error records how many messages went out before it.

        Returns:
            Number of messages sent.
        """
        sent = 0
        for message in messages:
            try:
                self.send(message)
            except SlackDeliveryError as e:
                e.sent = sent
                raise
            sent += 1
        return sent

    def send_test(self, settings: NotificationSettings) -> None:
        """Send a test message to check the webhook and channel settings."""
        self.send(settings.message("RabbitPulse test message - Slack alerts are working!"))
