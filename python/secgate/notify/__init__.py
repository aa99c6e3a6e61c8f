"""Verdict notification."""

from .email_notifier import EmailNotifier

__all__ = ["EmailNotifier"]
