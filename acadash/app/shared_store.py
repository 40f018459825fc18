"""Publish/subscribe store for values several screens observe.

The unread badge, the notification list and the messages screen all show
unread totals. The academy switcher publishes the current academy and the
program members and attendance screens reload when it changes. Each value
lives here once, writers ``publish`` and readers ``subscribe`` instead of
polling on their own.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List

LOGGER = logging.getLogger(__name__)

UNREAD_NOTIFICATIONS = "unread_notifications"
UNREAD_MESSAGES = "unread_messages"
CURRENT_ACADEMY_ID = "current_academy_id"

Subscriber = Callable[[Any], None]


class SharedStore:
    def __init__(self) -> None:
        self._values: Dict[str, Any] = {}
        self._subscribers: Dict[str, List[Subscriber]] = defaultdict(list)

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def publish(self, key: str, value: Any) -> None:
        """Store ``value`` and notify subscribers when it changed."""
        if key in self._values and self._values[key] == value:
            return
        self._values[key] = value
        for callback in list(self._subscribers[key]):
            try:
                callback(value)
            except Exception:
                LOGGER.exception("Subscriber for %s failed", key)

    def subscribe(self, key: str, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback`` and return a function that unsubscribes it.

        The current value, when one was published, is delivered immediately.
        """
        self._subscribers[key].append(callback)
        if key in self._values:
            callback(self._values[key])

        def _unsubscribe() -> None:
            if callback in self._subscribers[key]:
                self._subscribers[key].remove(callback)

        return _unsubscribe

    def subscriber_count(self, key: str) -> int:
        return len(self._subscribers.get(key, ()))


__all__ = [
    "CURRENT_ACADEMY_ID",
    "SharedStore",
    "UNREAD_MESSAGES",
    "UNREAD_NOTIFICATIONS",
]
