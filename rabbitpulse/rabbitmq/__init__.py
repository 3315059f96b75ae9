"""RabbitMQ management API access."""

from .client import RabbitMQClient, parse_queue_stats

__all__ = ["RabbitMQClient", "parse_queue_stats"]
