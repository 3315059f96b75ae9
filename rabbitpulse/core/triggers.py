"""Threshold trigger definitions."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from ..exceptions import ConfigError
from .stats import QueueStat


class TriggerKind(Enum):
    """
    The closed set of metrics a trigger can watch.

    Each member carries the config tag, the queue stat field it reads
    and the name used in alert text.
    """

    CONSUMERS_TOTAL = ("consumers_total", "consumers", "total number of consumers")
    MEMORY_TOTAL = ("memory_total", "memory", "memory consumption")
    MESSAGES_TOTAL = ("messages_total", "messages", "total number of messages")
    MESSAGES_READY = ("messages_ready", "messages_ready", "ready messages")
    MESSAGES_UNACKNOWLEDGED = (
        "messages_unacknowledged",
        "messages_unacknowledged",
        "unacknowledged messages",
    )

    def __init__(self, tag: str, field_name: str, display_name: str):
        self.tag = tag
        self.field_name = field_name
        self.display_name = display_name

    @classmethod
    def from_tag(cls, tag: str) -> "TriggerKind":
        """Look up a kind by its config `type` value."""
        for kind in cls:
            if kind.tag == tag:
                return kind
        known = ", ".join(kind.tag for kind in cls)
        raise ConfigError(f"Unknown trigger type {tag!r} (expected one of: {known})")


# Stat names the broker adapter extracts, in the order it emits them
FIELD_NAMES = (
    TriggerKind.MESSAGES_TOTAL.field_name,
    TriggerKind.MESSAGES_READY.field_name,
    TriggerKind.MESSAGES_UNACKNOWLEDGED.field_name,
    TriggerKind.CONSUMERS_TOTAL.field_name,
    TriggerKind.MEMORY_TOTAL.field_name,
)


@dataclass(frozen=True)
class Trigger:
    """A configured alerting rule."""

    kind: TriggerKind
    threshold: int
    queue: Optional[str] = None  # None applies to every queue

    @property
    def field_name(self) -> str:
        return self.kind.field_name

    @property
    def display_name(self) -> str:
        return self.kind.display_name

    def matches(self, stat: QueueStat) -> bool:
        """Whether this trigger applies to the given stat."""
        if stat.stat_name != self.field_name:
            return False
        if self.queue is not None:
            return stat.queue_name == self.queue
        return True

    def fires(self, stat: QueueStat) -> bool:
        return stat.value > self.threshold

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Trigger":
        """
        Create a Trigger from a `[[triggers]]` table.

        Raises:
            ConfigError: If the type is unknown or the threshold is invalid.
        """
        if not isinstance(data, dict) or "type" not in data:
            raise ConfigError(f"Trigger is missing 'type': {data!r}")
        kind = TriggerKind.from_tag(data["type"])

        threshold = data.get("threshold")
        # bool is an int subclass, reject it explicitly
        if isinstance(threshold, bool) or not isinstance(threshold, int) or threshold < 0:
            raise ConfigError(
                f"Trigger {kind.tag!r} needs a non-negative integer threshold, "
                f"got {threshold!r}"
            )

        queue = data.get("queue")
        if queue is not None and not isinstance(queue, str):
            raise ConfigError(f"Trigger {kind.tag!r} has a non-string queue: {queue!r}")

        return cls(kind=kind, threshold=threshold, queue=queue)

    def __str__(self) -> str:
        scope = self.queue if self.queue is not None else "*"
        return f"{self.kind.tag}({scope}) > {self.threshold}"
