from __future__ import annotations

import asyncio
from dataclasses import replace
from datetime import datetime
from typing import Callable, Iterable, List, Optional

from acadash.app.polling_scheduler import PollingScheduler
from acadash.app.shared_store import UNREAD_NOTIFICATIONS, SharedStore
from acadash.domain.derived import (
    CategoryTab,
    NotificationCounts,
    ReadFilter,
    filter_notifications,
    notification_counts,
)
from acadash.domain.entities import Notification
from acadash.domain.ports import Notifier
from acadash.usecases.notifications import NotificationUseCases
from acadash.viewmodels.base import OptimisticChange, ScreenVM


class NotificationsVM(ScreenVM):
    """Notification center with optimistic mutations.

    Mark-read, mark-all-read and delete change the list before the server
    answers. A failed call puts back only the items it touched. The unread total
    is published to the shared store after every change.
    """

    load_error_message = "Failed to load notifications"
    clear_on_error = False

    def __init__(
        self,
        usecases: NotificationUseCases,
        *,
        notifier: Notifier,
        store: Optional[SharedStore] = None,
        scheduler: Optional[PollingScheduler] = None,
        locale: str = "en",
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        super().__init__(notifier=notifier, scheduler=scheduler, locale=locale)
        self.uc = usecases
        self.store = store
        self._clock = clock
        self.notifications: List[Notification] = []
        self.active_tab: CategoryTab = "all"
        self.read_filter: ReadFilter = "all"

    # ---------- derived ----------

    @property
    def visible(self) -> List[Notification]:
        return filter_notifications(self.notifications, category=self.active_tab, read_filter=self.read_filter)

    @property
    def counts(self) -> NotificationCounts:
        now = self._clock() if self._clock else None
        return notification_counts(self.notifications, now=now)

    @property
    def unread_count(self) -> int:
        return sum(1 for item in self.notifications if not item.read)

    def _publish(self) -> None:
        if self.store is not None and not self.scope.closed:
            self.store.publish(UNREAD_NOTIFICATIONS, self.unread_count)

    # ---------- load ----------

    async def load(self) -> None:
        ok, items = await self._run(self.loading, self.load_error_message, self.uc.load)
        if ok:
            self.notifications = list(items)
        elif self.clear_on_error and not self.scope.closed:
            self.notifications = []
        self._publish()

    # ---------- optimistic mutations ----------

    async def _optimistic(self, change: OptimisticChange, fallback: str, fn, *args) -> bool:
        self.notifications = change.applied
        self._publish()
        ok, _ = await self._run(None, fallback, fn, *args)
        if not ok and not self.scope.closed:
            self.notifications = change.undo(self.notifications)
            self._publish()
        return ok

    def _mark(self, ids: Iterable[str]) -> OptimisticChange:
        return OptimisticChange(self.notifications, ids, lambda item: replace(item, read=True))

    async def mark_read(self, notification_id: str) -> bool:
        return await self._optimistic(
            self._mark([notification_id]), "Failed to mark as read", self.uc.mark_read, notification_id
        )

    async def mark_all_read(self) -> bool:
        unread = [item.id for item in self.notifications if not item.read]
        return await self._optimistic(self._mark(unread), "Failed to mark all as read", self.uc.mark_all_read)

    async def delete(self, notification_id: str) -> bool:
        change = OptimisticChange(self.notifications, [notification_id], lambda item: None)
        return await self._optimistic(change, "Failed to delete notification", self.uc.delete, notification_id)

    async def clear_read(self) -> None:
        """Remove read notifications; reload when any delete fails."""
        read_ids = [item.id for item in self.notifications if item.read]
        if not read_ids:
            return
        self.notifications = [item for item in self.notifications if not item.read]
        self._publish()
        results = await asyncio.gather(*(self._run_silent(self.uc.delete, item_id) for item_id in read_ids))
        if self.scope.closed:
            return
        if not all(ok for ok, _ in results):
            await self.load()


__all__ = ["NotificationsVM"]
