"""Header badge showing unread notification and message totals.

The badge reads both totals from the shared store, so a screen that marks
items read updates it immediately. A slow poll of ``getUnreadCounts`` keeps
the store in step with changes made elsewhere.
"""

from __future__ import annotations

from typing import Optional

from acadash.app.polling_scheduler import PollingScheduler
from acadash.app.shared_store import UNREAD_MESSAGES, UNREAD_NOTIFICATIONS, SharedStore
from acadash.domain.ports import Notifier
from acadash.usecases.notifications import NotificationUseCases
from acadash.viewmodels.base import ScreenVM

POLL_CHANNEL = "unread:poll"


class UnreadBadgeVM(ScreenVM):
    load_error_message = "Failed to load unread counts"

    def __init__(
        self,
        usecases: NotificationUseCases,
        *,
        notifier: Notifier,
        store: SharedStore,
        scheduler: Optional[PollingScheduler] = None,
        locale: str = "en",
        poll_ms: int = 60000,
    ) -> None:
        super().__init__(notifier=notifier, scheduler=scheduler, locale=locale)
        self.uc = usecases
        self.store = store
        self.poll_ms = poll_ms
        self.notifications = 0
        self.messages = 0

    @property
    def total(self) -> int:
        return self.notifications + self.messages

    async def mount(self) -> None:
        self._unsubscribers.append(self.store.subscribe(UNREAD_NOTIFICATIONS, self._on_notifications))
        self._unsubscribers.append(self.store.subscribe(UNREAD_MESSAGES, self._on_messages))
        await self.load()

    def _on_notifications(self, value) -> None:
        self.notifications = int(value or 0)

    def _on_messages(self, value) -> None:
        self.messages = int(value or 0)

    async def load(self) -> None:
        ok, counts = await self._run_silent(self.uc.load_unread_counts)
        if ok:
            self.store.publish(UNREAD_NOTIFICATIONS, counts.notifications)
            self.store.publish(UNREAD_MESSAGES, counts.messages)
        self.scope.schedule(POLL_CHANNEL, self.poll_ms, self._on_poll)

    def _on_poll(self) -> None:
        self.scope.spawn(self.load())


__all__ = ["POLL_CHANNEL", "UnreadBadgeVM"]
