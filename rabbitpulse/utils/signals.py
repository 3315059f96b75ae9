"""Graceful shutdown signal handling."""

import signal
import logging
from threading import Event
from typing import Optional

logger = logging.getLogger(__name__)

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def install_signal_handlers(shutdown_event: Optional[Event] = None) -> Event:
    """
    Set an event when SIGINT or SIGTERM arrives.

    The monitor waits on the event between polls, so a signal ends the
    current sleep immediately and the loop exits after the running check.

    Args:
        shutdown_event: Event to set; a new one is created if omitted.

    Returns:
        The shutdown event.
    """
    if shutdown_event is None:
        shutdown_event = Event()

    def handler(signum, frame):
        logger.info(f"Received {signal.Signals(signum).name}, shutting down after current check")
        shutdown_event.set()

    for signum in SHUTDOWN_SIGNALS:
        signal.signal(signum, handler)

    logger.debug("Signal handlers installed for SIGINT and SIGTERM")
    return shutdown_event
