"""
cli/i18n/messages/__init__.py - Message Registry

Aggregates all message dictionaries from sub-modules.
Messages are organized by namespace (runner, sync)

Structure:
    MESSAGES = {
        "runner.execution_failed": {"ko": "...", "en": "..."},
        "sync.completed": {"ko": "...", "en": "..."},
        ...
    }
"""

from __future__ import annotations

from typing import TypedDict


class MessageDict(TypedDict):
    """Message dictionary type."""

    ko: str
    en: str


# Master message registry
MESSAGES: dict[str, MessageDict] = {}


def register_messages(namespace: str, messages: dict[str, MessageDict]) -> None:
    """Register messages for a namespace.

    Args:
        namespace: Namespace prefix (e.g., "runner", "sync")
        messages: Dictionary of message key -> translations
    """
    for key, value in messages.items():
        MESSAGES[f"{namespace}.{key}"] = value


# These imports must come after register_messages is defined
from cli.i18n.messages.runner import RUNNER_MESSAGES  # noqa: E402
from cli.i18n.messages.sync import SYNC_MESSAGES  # noqa: E402

register_messages("runner", RUNNER_MESSAGES)
register_messages("sync", SYNC_MESSAGES)

__all__ = ["MESSAGES", "register_messages", "MessageDict"]
