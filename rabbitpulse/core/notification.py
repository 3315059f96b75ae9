"""Notification data structures."""

from dataclasses import dataclass
from typing import Optional, List, Dict, Any


@dataclass(frozen=True)
class SlackMessage:
    """Alert payload ready for the Slack incoming webhook."""

    username: str
    channel: str  # "#channel"
    text: str
    icon_url: Optional[str] = None
    icon_emoji: Optional[str] = None
    attachments: Optional[List[Dict[str, Any]]] = None

    def to_payload(self) -> Dict[str, Any]:
        """Return the webhook JSON body, leaving out unset fields."""
        payload = {
            "username": self.username,
            "channel": self.channel,
            "text": self.text,
            "icon_url": self.icon_url,
            "icon_emoji": self.icon_emoji,
            "attachments": self.attachments,
        }
        return {key: value for key, value in payload.items() if value is not None}

    def __str__(self) -> str:
        return f"{self.channel}: {self.text}"


@dataclass(frozen=True)
class NotificationSettings:
    """Per-process values copied onto every outgoing message."""

    username: str
    channel: str
    icon_url: Optional[str] = None
    icon_emoji: Optional[str] = None

    def message(self, text: str) -> SlackMessage:
        """Build an alert message with these settings."""
        return SlackMessage(
            username=self.username,
            channel=self.channel,
            text=text,
            icon_url=self.icon_url,
            icon_emoji=self.icon_emoji,
        )
