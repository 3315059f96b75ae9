"""Exception types raised by RabbitPulse."""


class RabbitPulseError(Exception):
    """Base class for all RabbitPulse errors."""


class ConfigError(RabbitPulseError):
    """Configuration file is missing or invalid."""


class RabbitMQError(RabbitPulseError):
    """Queue statistics could not be fetched from the management API."""


class SlackDeliveryError(RabbitPulseError):
    """A message could not be delivered to the Slack webhook."""

    sent = 0  # messages delivered in the same batch before the failure
