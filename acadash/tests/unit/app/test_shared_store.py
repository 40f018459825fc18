from __future__ import annotations

import logging
from typing import List

from acadash.app.shared_store import UNREAD_MESSAGES, UNREAD_NOTIFICATIONS, SharedStore


def test_subscribe_replays_current_value() -> None:
    store = SharedStore()
    store.publish(UNREAD_MESSAGES, 4)
    seen: List[int] = []

    store.subscribe(UNREAD_MESSAGES, seen.append)

    assert seen == [4]


def test_publish_notifies_only_on_change() -> None:
    store = SharedStore()
    seen: List[int] = []
    store.subscribe(UNREAD_NOTIFICATIONS, seen.append)

    store.publish(UNREAD_NOTIFICATIONS, 2)
    store.publish(UNREAD_NOTIFICATIONS, 2)
    store.publish(UNREAD_NOTIFICATIONS, 1)

    assert seen == [2, 1]
    assert store.get(UNREAD_NOTIFICATIONS) == 1
    assert store.get(UNREAD_MESSAGES, 0) == 0


def test_unsubscribe_stops_delivery() -> None:
    store = SharedStore()
    seen: List[int] = []
    unsubscribe = store.subscribe(UNREAD_MESSAGES, seen.append)
    assert store.subscriber_count(UNREAD_MESSAGES) == 1

    unsubscribe()
    unsubscribe()
    store.publish(UNREAD_MESSAGES, 9)

    assert seen == []
    assert store.subscriber_count(UNREAD_MESSAGES) == 0


def test_failing_subscriber_does_not_block_others(caplog) -> None:
    store = SharedStore()
    seen: List[int] = []

    def broken(_value) -> None:
        raise RuntimeError("boom")

    store.subscribe(UNREAD_MESSAGES, broken)
    store.subscribe(UNREAD_MESSAGES, seen.append)

    with caplog.at_level(logging.ERROR, logger="acadash.app.shared_store"):
        store.publish(UNREAD_MESSAGES, 3)

    assert seen == [3]
    assert "Subscriber for unread_messages failed" in caplog.text
