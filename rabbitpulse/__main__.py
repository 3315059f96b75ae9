"""CLI entry point for RabbitPulse."""

import argparse
import logging
import sys
from pathlib import Path

from .config import load_config, get_default_config_toml
from .core.monitor import QueueMonitor
from .exceptions import ConfigError, RabbitPulseError
from .rabbitmq.client import RabbitMQClient
from .slack.sender import SlackSender
from .utils.logging import setup_logging
from .utils.signals import install_signal_handlers

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rabbitpulse",
        description="Watch RabbitMQ queues and post threshold alerts to Slack",
    )

    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path("config.toml"),
        help="Path to configuration file",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print alerts instead of posting them to Slack",
    )

    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single check and exit",
    )

    parser.add_argument(
        "--show-config",
        action="store_true",
        help="Show default configuration and exit",
    )

    parser.add_argument(
        "--slack-test",
        action="store_true",
        help="Send a test message to the configured Slack channel and exit",
    )

    return parser


def main(argv=None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    if args.show_config:
        print(get_default_config_toml())
        return 0

    setup_logging(verbose=args.verbose)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    if config.settings.log_file:
        setup_logging(verbose=args.verbose, log_file=config.settings.log_file)

    sender = SlackSender(config.slack.webhook_url, dry_run=args.dry_run)
    settings = config.slack.notification_settings()

    if args.slack_test:
        try:
            sender.send_test(settings)
        except RabbitPulseError as e:
            print(f"Failed to send test message: {e}", file=sys.stderr)
            return 1
        print("Test message sent successfully!")
        return 0

    client = RabbitMQClient(
        host=config.rabbitmq.host,
        username=config.rabbitmq.username,
        password=config.rabbitmq.password,
        protocol=config.rabbitmq.protocol,
        port=config.rabbitmq.port,
        vhost=config.rabbitmq.vhost,
    )

    monitor = QueueMonitor(
        client=client,
        sender=sender,
        triggers=config.triggers,
        settings=settings,
        shutdown_event=install_signal_handlers(),
        poll_seconds=config.settings.poll_seconds,
        exit_on_error=config.settings.exit_on_error,
    )

    try:
        if args.once:
            monitor.run_cycle()
        else:
            monitor.run()
    except RabbitPulseError as e:
        logger.error(f"Check failed: {e}")
        return 1
    except KeyboardInterrupt:
        pass

    return 0


if __name__ == "__main__":
    sys.exit(main())
