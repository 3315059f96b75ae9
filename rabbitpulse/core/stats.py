"""Queue statistic data structures."""

from dataclasses import dataclass


@dataclass(frozen=True)
class QueueStat:
    """One observed metric for one queue at poll time."""

    queue_name: str
    stat_name: str  # consumers, memory, messages, messages_ready, ...
    value: int

    def __str__(self) -> str:
        return f"{self.queue_name}.{self.stat_name}={self.value}"
