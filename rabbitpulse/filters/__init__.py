"""Alert filters for RabbitPulse."""

from .registry import ActiveTriggerRegistry

__all__ = ["ActiveTriggerRegistry"]
