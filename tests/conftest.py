"""Shared test fixtures and dummy classes."""

from __future__ import annotations

import pytest

from rabbitpulse.core.notification import NotificationSettings
from rabbitpulse.core.stats import QueueStat
from rabbitpulse.core.triggers import Trigger, TriggerKind


class DummyResponse:
    """Dummy HTTP response for testing."""

    def __init__(self, data: object, status: int = 200, text: str = "") -> None:
        self._data = data
        self.status_code = status
        self.text = text or str(data)
        self.ok = 200 <= status < 300

    def json(self) -> object:
        if isinstance(self._data, Exception):
            raise self._data
        return self._data


def make_trigger(tag: str, threshold: int, queue: str | None = None) -> Trigger:
    return Trigger(TriggerKind.from_tag(tag), threshold, queue)


def make_stat(queue: str, stat: str, value: int) -> QueueStat:
    return QueueStat(queue, stat, value)


@pytest.fixture
def settings() -> NotificationSettings:
    return NotificationSettings(username="RabbitPulse", channel="#alerts")
