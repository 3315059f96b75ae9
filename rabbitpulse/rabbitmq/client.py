"""Queue statistics from the RabbitMQ management HTTP API."""

import logging
from typing import Any, List
from urllib.parse import quote

import requests

from ..core.stats import QueueStat
from ..core.triggers import FIELD_NAMES
from ..exceptions import RabbitMQError

logger = logging.getLogger(__name__)

_TIMEOUT = 10


def parse_queue_stats(queues: List[Any]) -> List[QueueStat]:
    """
    Flatten the `/api/queues` response into queue stats.

    Queues that do not report a field (idle queues have no message
    counts yet) simply contribute fewer stats.

    Args:
        queues: Decoded JSON array of queue objects.

    Returns:
        Stats in queue order, then field order.
    """
    stats: List[QueueStat] = []
    for queue in queues:
        if not isinstance(queue, dict) or "name" not in queue:
            logger.debug(f"Skipping malformed queue entry: {queue!r}")
            continue

        for field_name in FIELD_NAMES:
            value = queue.get(field_name)
            if isinstance(value, bool) or not isinstance(value, int):
                continue
            stats.append(QueueStat(queue["name"], field_name, value))

    return stats


class RabbitMQClient:
    """
    Minimal client for the management plugin's queue listing.

    Fetches every queue (optionally limited to one vhost) and reports
    its counters as QueueStat records.
    """

    def __init__(
        self,
        host: str,
        username: str,
        password: str,
        protocol: str = "http",
        port: str = "15672",
        vhost: str = "",
        timeout: float = _TIMEOUT,
    ):
        """
        Initialize the client.

        Args:
            host: Management API host.
            username: Management user.
            password: Management password.
            protocol: "http" or "https".
            port: Management API port.
            vhost: Restrict to this vhost; empty for all vhosts.
            timeout: Request timeout in seconds.
        """
        self.host = host
        self.port = port
        self.protocol = protocol
        self.vhost = vhost
        self.timeout = timeout
        self._auth = (username, password)

    @property
    def queues_url(self) -> str:
        url = f"{self.protocol}://{self.host}:{self.port}/api/queues"
        if self.vhost:
            # "/" is the default vhost and must be escaped as %2F
            url = f"{url}/{quote(self.vhost, safe='')}"
        return url

    def get_queue_stats(self) -> List[QueueStat]:
        """
        Fetch current stats for all queues.

        Raises:
            RabbitMQError: On connection failure, error status or bad JSON.
        """
        try:
            resp = requests.get(self.queues_url, auth=self._auth, timeout=self.timeout)
        except requests.RequestException as e:
            raise RabbitMQError(f"Failed to reach {self.host}:{self.port}: {e}") from e

        if not 200 <= resp.status_code < 300:
            raise RabbitMQError(
                f"Management API returned {resp.status_code} for {self.queues_url}: "
                f"{resp.text[:200]}"
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise RabbitMQError(f"Management API returned invalid JSON: {e}") from e

        if not isinstance(data, list):
            raise RabbitMQError(f"Expected a list of queues, got {type(data).__name__}")

        stats = parse_queue_stats(data)
        logger.debug(f"Fetched {len(stats)} stat(s) for {len(data)} queue(s)")
        return stats
