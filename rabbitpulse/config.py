"""Configuration management for RabbitPulse."""

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from .core.notification import NotificationSettings
from .core.triggers import Trigger
from .exceptions import ConfigError

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

logger = logging.getLogger(__name__)

# Environment variables that take precedence over the config file
PASSWORD_ENV = "RABBITMQ_PASSWORD"
WEBHOOK_ENV = "SLACK_WEBHOOK_URL"


def _require(section: Dict[str, Any], name: str, key: str) -> Any:
    """Return a required key from a config table."""
    if key not in section:
        raise ConfigError(f"Missing required key '{key}' in [{name}]")
    return section[key]


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = data.get(name)
    if not isinstance(section, dict):
        raise ConfigError(f"Missing required section [{name}]")
    return section


def _optional_str(section: Dict[str, Any], name: str, key: str) -> Optional[str]:
    """Return an optional string key, rejecting other types."""
    value = section.get(key)
    if value is not None and not isinstance(value, str):
        raise ConfigError(f"'{key}' in [{name}] must be a string, got {value!r}")
    return value


@dataclass
class RabbitMQConfig:
    """RabbitMQ management API connection."""

    host: str
    username: str
    password: str
    protocol: str = "http"
    port: str = "15672"
    vhost: str = ""  # empty means all vhosts

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RabbitMQConfig":
        return cls(
            host=str(_require(data, "rabbitmq", "host")),
            username=str(_require(data, "rabbitmq", "username")),
            password=os.getenv(PASSWORD_ENV) or str(_require(data, "rabbitmq", "password")),
            protocol=str(data.get("protocol", "http")),
            # Port may be written as a string or an integer in TOML
            port=str(data.get("port", "15672")),
            vhost=str(data.get("vhost", "")),
        )


@dataclass
class MonitorSettings:
    """Polling loop configuration."""

    poll_seconds: int = 60
    exit_on_error: bool = True  # False logs cycle failures and keeps polling
    log_file: Optional[Path] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MonitorSettings":
        poll_seconds = data.get("poll_seconds", 60)
        if isinstance(poll_seconds, bool) or not isinstance(poll_seconds, int) or poll_seconds < 1:
            raise ConfigError(f"poll_seconds must be a positive integer, got {poll_seconds!r}")
        exit_on_error = data.get("exit_on_error", True)
        if not isinstance(exit_on_error, bool):
            raise ConfigError(f"exit_on_error must be true or false, got {exit_on_error!r}")
        log_file = _optional_str(data, "settings", "log_file")
        return cls(
            poll_seconds=poll_seconds,
            exit_on_error=exit_on_error,
            log_file=Path(log_file) if log_file else None,
        )


@dataclass
class SlackConfig:
    """Slack incoming webhook configuration."""

    webhook_url: str
    channel: str
    screen_name: str
    icon_url: Optional[str] = None
    icon_emoji: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SlackConfig":
        webhook_url = os.getenv(WEBHOOK_ENV) or _require(data, "slack", "webhook_url")
        return cls(
            webhook_url=str(webhook_url),
            channel=str(_require(data, "slack", "channel")),
            screen_name=str(_require(data, "slack", "screen_name")),
            icon_url=_optional_str(data, "slack", "icon_url"),
            icon_emoji=_optional_str(data, "slack", "icon_emoji"),
        )

    def notification_settings(self) -> NotificationSettings:
        """Values stamped onto every alert message."""
        return NotificationSettings(
            username=self.screen_name,
            channel=f"#{self.channel}",
            icon_url=self.icon_url,
            icon_emoji=self.icon_emoji,
        )


@dataclass
class Config:
    """Main configuration."""

    rabbitmq: RabbitMQConfig
    slack: SlackConfig
    settings: MonitorSettings = field(default_factory=MonitorSettings)
    triggers: List[Trigger] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """Create Config from dictionary."""
        settings = data.get("settings", {})
        if not isinstance(settings, dict):
            raise ConfigError(f"[settings] must be a table, got {settings!r}")

        raw_triggers = data.get("triggers")
        if not isinstance(raw_triggers, list):
            raise ConfigError("Missing required [[triggers]] entries")

        return cls(
            rabbitmq=RabbitMQConfig.from_dict(_section(data, "rabbitmq")),
            slack=SlackConfig.from_dict(_section(data, "slack")),
            settings=MonitorSettings.from_dict(settings),
            triggers=[Trigger.from_dict(raw) for raw in raw_triggers],
        )


def load_config(path: Path) -> Config:
    """
    Load configuration from TOML file.

    Values from a `.env` file or the environment override the
    RabbitMQ password and the Slack webhook URL.

    Args:
        path: Path to config file.

    Returns:
        Config object.

    Raises:
        ConfigError: If the file is missing, unparsable or invalid.
    """
    load_dotenv()

    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    config = Config.from_dict(data)
    logger.info(f"Read config file from {path}")
    logger.debug(f"Loaded {len(config.triggers)} trigger(s): {', '.join(map(str, config.triggers))}")
    return config


def get_default_config_toml() -> str:
    """Return default configuration as TOML string."""
    return '''# RabbitPulse Configuration

[rabbitmq]
protocol = "http"
host = "localhost"
port = "15672"
username = "guest"
password = "guest"    # or set RABBITMQ_PASSWORD
vhost = "/"           # leave empty to watch every vhost

[settings]
poll_seconds = 60
exit_on_error = true  # false logs failed cycles and keeps polling
# log_file = "~/.local/share/rabbitpulse/rabbitpulse.log"

[slack]
webhook_url = "https://hooks.slack.com/services/XXX/YYY/ZZZ"  # or set SLACK_WEBHOOK_URL
channel = "alerts"
screen_name = "RabbitPulse"
icon_emoji = ":rabbit:"
# icon_url = "https://example.com/rabbit.png"

# Trigger types: consumers_total, memory_total, messages_total,
# messages_ready, messages_unacknowledged.
# An alert fires when the value is strictly greater than the threshold.
# Omit `queue` to apply a trigger to every queue.

[[triggers]]
type = "messages_ready"
threshold = 100
queue = "orders"

[[triggers]]
type = "messages_unacknowledged"
threshold = 500
'''
