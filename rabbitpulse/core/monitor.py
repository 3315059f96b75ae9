"""Main queue monitoring orchestration."""

import logging
from threading import Event
from typing import List, Sequence

from ..exceptions import RabbitPulseError, SlackDeliveryError
from ..rabbitmq.client import RabbitMQClient
from ..slack.sender import SlackSender
from .engine import evaluate
from .notification import NotificationSettings, SlackMessage
from .triggers import Trigger

logger = logging.getLogger(__name__)


class QueueMonitor:
    """
    Main monitoring orchestrator.

    Runs poll cycles: fetch queue stats, evaluate triggers, deliver alerts.
    """

    def __init__(
        self,
        client: RabbitMQClient,
        sender: SlackSender,
        triggers: Sequence[Trigger],
        settings: NotificationSettings,
        shutdown_event: Event,
        poll_seconds: int = 60,
        exit_on_error: bool = True,
    ):
        """
        Initialize the queue monitor.

        Args:
            client: Source of queue stats.
            sender: Delivery for alert messages.
            triggers: Configured triggers, in evaluation order.
            settings: Username, channel and icons for alerts.
            shutdown_event: Event to signal shutdown.
            poll_seconds: Seconds to wait between cycles.
            exit_on_error: Stop on a failed cycle instead of logging it.
        """
        self.client = client
        self.sender = sender
        self.triggers = list(triggers)
        self.settings = settings
        self.shutdown_event = shutdown_event
        self.poll_seconds = poll_seconds
        self.exit_on_error = exit_on_error

        # Stats
        self._cycles_run = 0
        self._cycles_failed = 0
        self._alerts_sent = 0

    def run_cycle(self) -> List[SlackMessage]:
        """
        Run one fetch-evaluate-deliver pass.

        Returns:
            Messages that were delivered.

        Raises:
            RabbitMQError: If stats could not be fetched.
            SlackDeliveryError: If an alert could not be delivered.
        """
        logger.info(f"Checking queue info at {self.client.host}:{self.client.port}")
        stats = self.client.get_queue_stats()
        logger.debug(f"Fetched queue info: {', '.join(map(str, stats))}")

        messages = evaluate(self.triggers, stats, self.settings)
        if messages:
            logger.info(f"{len(messages)} trigger(s) fired")

        try:
            self._alerts_sent += self.sender.send_many(messages)
        except SlackDeliveryError as e:
            self._alerts_sent += e.sent
            raise
        self._cycles_run += 1
        return messages

    def run(self) -> None:
        """
        Run cycles until shutdown.

        Raises:
            RabbitPulseError: From a failed cycle when exit_on_error is set.
        """
        logger.info(
            f"Starting RabbitPulse with {len(self.triggers)} trigger(s), "
            f"polling every {self.poll_seconds}s"
        )

        try:
            while not self.shutdown_event.is_set():
                try:
                    self.run_cycle()
                except RabbitPulseError as e:
                    self._cycles_failed += 1
                    if self.exit_on_error:
                        raise
                    logger.error(f"Check failed, will retry next cycle: {e}")
                else:
                    logger.info(f"Check passed, sleeping for {self.poll_seconds}s")

                self.shutdown_event.wait(timeout=self.poll_seconds)
        finally:
            self.stop()

    def stop(self) -> None:
        """Log a summary of the run."""
        logger.info(
            f"Ran {self._cycles_run} check(s), sent {self._alerts_sent} alert(s), "
            f"{self._cycles_failed} check(s) failed"
        )
        logger.info("RabbitPulse stopped")
