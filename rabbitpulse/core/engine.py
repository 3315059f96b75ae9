"""Alert evaluation for one poll cycle."""

import logging
from typing import Iterable, List, Sequence

from ..filters.registry import ActiveTriggerRegistry
from .notification import NotificationSettings, SlackMessage
from .stats import QueueStat
from .triggers import Trigger

logger = logging.getLogger(__name__)

ALERT_TEMPLATE = (
    "Queue {queue_name} has passed a threshold of {threshold} {display_name}. "
    "Currently at {value}."
)


def format_alert(trigger: Trigger, stat: QueueStat) -> str:
    """Render the alert text for a firing trigger."""
    return ALERT_TEMPLATE.format(
        queue_name=stat.queue_name,
        threshold=trigger.threshold,
        display_name=trigger.display_name,
        value=stat.value,
    )


def evaluate(
    triggers: Iterable[Trigger],
    stats: Sequence[QueueStat],
    settings: NotificationSettings,
) -> List[SlackMessage]:
    """
    Evaluate every trigger against the current queue stats.

    Triggers are visited in configured order and stats in supplied order,
    so messages come out in that order. Only the first firing trigger for
    a given queue and field produces a message; later ones are dropped
    even if their kind or threshold differ.

    Args:
        triggers: Configured triggers.
        stats: Queue stats fetched for this cycle.
        settings: Username, channel and icons for the messages.

    Returns:
        Messages to deliver, possibly empty.
    """
    registry = ActiveTriggerRegistry()
    messages: List[SlackMessage] = []

    for trigger in triggers:
        for stat in stats:
            if not trigger.matches(stat) or not trigger.fires(stat):
                continue
            if not registry.register(stat.queue_name, trigger.field_name):
                continue

            logger.debug(f"Trigger {trigger} fired on {stat}")
            messages.append(settings.message(format_alert(trigger, stat)))

    registry.clear()
    return messages
