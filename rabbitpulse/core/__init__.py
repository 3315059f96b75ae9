"""Core alerting module for RabbitPulse."""

from .stats import QueueStat
from .triggers import Trigger, TriggerKind
from .notification import NotificationSettings, SlackMessage
from .engine import evaluate

__all__ = [
    "QueueStat",
    "Trigger",
    "TriggerKind",
    "NotificationSettings",
    "SlackMessage",
    "evaluate",
]
