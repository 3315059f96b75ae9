from pathlib import Path

import pytest

from rabbitpulse import config
from rabbitpulse.config import get_default_config_toml, load_config
from rabbitpulse.core.triggers import TriggerKind
from rabbitpulse.exceptions import ConfigError

CONFIG_TOML = """
[rabbitmq]
protocol = "https"
host = "rmq.internal"
port = 443
username = "monitor"
password = "secret"
vhost = "/"

[settings]
poll_seconds = 30

[slack]
webhook_url = "https://hooks.slack.com/services/T/B/X"
channel = "alerts"
screen_name = "RabbitPulse"
icon_emoji = ":rabbit:"

[[triggers]]
type = "messages_ready"
threshold = 100
queue = "orders"

[[triggers]]
type = "consumers_total"
threshold = 5
"""


@pytest.fixture(autouse=True)
def clean_env(monkeypatch) -> None:
    monkeypatch.setattr(config, "load_dotenv", lambda: False)
    monkeypatch.delenv(config.PASSWORD_ENV, raising=False)
    monkeypatch.delenv(config.WEBHOOK_ENV, raising=False)


def write_config(tmp_path: Path, text: str = CONFIG_TOML) -> Path:
    path = tmp_path / "config.toml"
    path.write_text(text)
    return path


def test_load_config(tmp_path) -> None:
    cfg = load_config(write_config(tmp_path))

    assert cfg.rabbitmq.host == "rmq.internal"
    assert cfg.rabbitmq.port == "443"
    assert cfg.rabbitmq.protocol == "https"
    assert cfg.rabbitmq.password == "secret"
    assert cfg.rabbitmq.vhost == "/"
    assert cfg.settings.poll_seconds == 30
    assert cfg.settings.exit_on_error is True
    assert cfg.settings.log_file is None
    assert cfg.slack.icon_emoji == ":rabbit:"
    assert cfg.slack.icon_url is None

    assert [t.kind for t in cfg.triggers] == [
        TriggerKind.MESSAGES_READY,
        TriggerKind.CONSUMERS_TOTAL,
    ]
    assert cfg.triggers[0].queue == "orders"
    assert cfg.triggers[1].queue is None


def test_notification_settings_prefix_channel(tmp_path) -> None:
    settings = load_config(write_config(tmp_path)).slack.notification_settings()

    assert settings.channel == "#alerts"
    assert settings.username == "RabbitPulse"
    assert settings.icon_emoji == ":rabbit:"


def test_environment_overrides_secrets(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv(config.PASSWORD_ENV, "from-env")
    monkeypatch.setenv(config.WEBHOOK_ENV, "https://hooks.slack.com/services/env")

    cfg = load_config(write_config(tmp_path))

    assert cfg.rabbitmq.password == "from-env"
    assert cfg.slack.webhook_url == "https://hooks.slack.com/services/env"


def test_missing_file(tmp_path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "nope.toml")


def test_invalid_toml(tmp_path) -> None:
    with pytest.raises(ConfigError, match="Invalid TOML"):
        load_config(write_config(tmp_path, "[rabbitmq\nhost ="))


def test_missing_section(tmp_path) -> None:
    text = CONFIG_TOML.replace("[slack]", "[slackx]")
    with pytest.raises(ConfigError, match=r"\[slack\]"):
        load_config(write_config(tmp_path, text))


def test_missing_required_key(tmp_path) -> None:
    text = CONFIG_TOML.replace('screen_name = "RabbitPulse"\n', "")
    with pytest.raises(ConfigError, match="screen_name"):
        load_config(write_config(tmp_path, text))


def test_missing_triggers(tmp_path) -> None:
    text = CONFIG_TOML.split("[[triggers]]")[0]
    with pytest.raises(ConfigError, match="triggers"):
        load_config(write_config(tmp_path, text))


def test_unknown_trigger_type(tmp_path) -> None:
    text = CONFIG_TOML.replace('type = "consumers_total"', 'type = "connections"')
    with pytest.raises(ConfigError, match="connections"):
        load_config(write_config(tmp_path, text))


def test_bad_poll_seconds(tmp_path) -> None:
    text = CONFIG_TOML.replace("poll_seconds = 30", "poll_seconds = 0")
    with pytest.raises(ConfigError, match="poll_seconds"):
        load_config(write_config(tmp_path, text))


def test_settings_defaults(tmp_path) -> None:
    text = CONFIG_TOML.replace("[settings]\npoll_seconds = 30\n", "")
    cfg = load_config(write_config(tmp_path, text))

    assert cfg.settings.poll_seconds == 60
    assert cfg.settings.exit_on_error is True


def test_default_config_is_loadable(tmp_path) -> None:
    cfg = load_config(write_config(tmp_path, get_default_config_toml()))

    assert cfg.rabbitmq.vhost == "/"
    assert len(cfg.triggers) == 2


def test_invalid_utf8(tmp_path) -> None:
    path = tmp_path / "config.toml"
    path.write_bytes(b"\xff\xfe" + CONFIG_TOML.encode())
    with pytest.raises(ConfigError, match="Invalid TOML"):
        load_config(path)


def test_directory_path(tmp_path) -> None:
    with pytest.raises(ConfigError, match="Cannot read config file"):
        load_config(tmp_path)


def test_settings_must_be_table(tmp_path) -> None:
    text = 'settings = "x"\n' + CONFIG_TOML.replace("[settings]\npoll_seconds = 30\n", "")
    with pytest.raises(ConfigError, match=r"\[settings\] must be a table"):
        load_config(write_config(tmp_path, text))


@pytest.mark.parametrize("value", ['"false"', '"no"', "0", "1"])
def test_exit_on_error_must_be_bool(tmp_path, value) -> None:
    text = CONFIG_TOML.replace("poll_seconds = 30", f"poll_seconds = 30\nexit_on_error = {value}")
    with pytest.raises(ConfigError, match="exit_on_error"):
        load_config(write_config(tmp_path, text))


def test_exit_on_error_false(tmp_path) -> None:
    text = CONFIG_TOML.replace("poll_seconds = 30", "poll_seconds = 30\nexit_on_error = false")
    assert load_config(write_config(tmp_path, text)).settings.exit_on_error is False


@pytest.mark.parametrize(
    "old, new, key",
    [
        ('icon_emoji = ":rabbit:"', "icon_emoji = 1", "icon_emoji"),
        ('icon_emoji = ":rabbit:"', "icon_url = [\"a\"]", "icon_url"),
        ("poll_seconds = 30", "poll_seconds = 30\nlog_file = true", "log_file"),
    ],
)
def test_optional_strings_are_validated(tmp_path, old, new, key) -> None:
    text = CONFIG_TOML.replace(old, new)
    with pytest.raises(ConfigError, match=key):
        load_config(write_config(tmp_path, text))
