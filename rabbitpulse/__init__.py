"""RabbitPulse: RabbitMQ queue threshold alerts for Slack."""

__version__ = "0.1.0"
