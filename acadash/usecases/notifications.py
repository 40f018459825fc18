from __future__ import annotations

from dataclasses import dataclass
from typing import List

from acadash.adapters.action_schemas import NotificationWire, UnreadCountsWire, parse_many
from acadash.domain.entities import Notification, UnreadCounts
from acadash.domain.ports import ActionPort
from acadash.usecases.invoke_action import call_action, parse_payload


@dataclass
class LoadNotifications:
    actions: ActionPort

    def __call__(self) -> List[Notification]:
        payload = call_action(self.actions, "getNotifications")
        return parse_payload("getNotifications", parse_many, NotificationWire, payload.get("notifications"))


@dataclass
class MarkNotificationRead:
    actions: ActionPort

    def __call__(self, notification_id: str) -> None:
        call_action(self.actions, "markAsRead", {"notificationId": notification_id})


@dataclass
class MarkAllNotificationsRead:
    actions: ActionPort

    def __call__(self) -> None:
        call_action(self.actions, "markAllAsRead")


@dataclass
class DeleteNotification:
    actions: ActionPort

    def __call__(self, notification_id: str) -> None:
        call_action(self.actions, "deleteNotification", {"notificationId": notification_id})


@dataclass
class LoadUnreadCounts:
    """Unread notification and message totals for the header badge."""

    actions: ActionPort

    def __call__(self) -> UnreadCounts:
        payload = call_action(self.actions, "getUnreadCounts")
        return parse_payload("getUnreadCounts", lambda: UnreadCountsWire.model_validate(payload).to_domain())


@dataclass
class NotificationUseCases:
    load: LoadNotifications
    mark_read: MarkNotificationRead
    mark_all_read: MarkAllNotificationsRead
    delete: DeleteNotification
    load_unread_counts: LoadUnreadCounts

    @classmethod
    def from_actions(cls, actions: ActionPort) -> "NotificationUseCases":
        return cls(
            load=LoadNotifications(actions),
            mark_read=MarkNotificationRead(actions),
            mark_all_read=MarkAllNotificationsRead(actions),
            delete=DeleteNotification(actions),
            load_unread_counts=LoadUnreadCounts(actions),
        )


__all__ = [
    "NotificationUseCases",
    "DeleteNotification",
    "LoadNotifications",
    "LoadUnreadCounts",
    "MarkAllNotificationsRead",
    "MarkNotificationRead",
]
