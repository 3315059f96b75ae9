"""Slack webhook delivery."""

from .sender import SlackSender

__all__ = ["SlackSender"]
