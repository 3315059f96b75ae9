"""Per-cycle alert deduplication."""

import logging
from typing import Set, Tuple

logger = logging.getLogger(__name__)


class ActiveTriggerRegistry:
    """
    Set of (queue name, field name) pairs already alerted on.

    Lives for a single evaluation cycle; at most one alert is emitted per
    queue and field while it is populated.
    """

    def __init__(self):
        self._active: Set[Tuple[str, str]] = set()

    def register(self, queue_name: str, field_name: str) -> bool:
        """
        Record an alert for this queue and field.

        Args:
            queue_name: Queue the alert is about.
            field_name: Stat field the firing trigger watches.

        Returns:
            True if the pair is new, False if it was already alerted on.
        """
        key = (queue_name, field_name)
        if key in self:
            logger.debug(f"Duplicate alert suppressed: {queue_name} {field_name}")
            return False

        self._active.add(key)
        return True

    def __contains__(self, key: Tuple[str, str]) -> bool:
        return key in self._active

    def clear(self) -> None:
        """Forget all registered pairs."""
        self._active.clear()

    def __len__(self) -> int:
        """Return number of registered pairs."""
        return len(self._active)
