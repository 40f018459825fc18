"""Scheduler helper that owns poll and debounce timers for view models.

View models never touch the event loop's timer API directly. They pass a
channel key and a delay to this class so timer state is tracked in one place
and can be cancelled when a screen unmounts. In production the schedule and
cancel callables come from :func:`asyncio_scheduler`; tests pass a manual
clock instead.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

LOGGER = logging.getLogger(__name__)

ScheduleFn = Callable[[int, Callable[[], None]], Any]
CancelFn = Callable[[Any], None]


@dataclass
class PollHandle:
    """Timer token associated with a single channel.

    Attributes:
        channel: Channel key (for example ``messages:poll``).
        token: Token returned by the underlying schedule function.
    """
    channel: str
    token: Any


class PollingScheduler:
    """Manage keyed one-shot timers on top of a ``schedule``/``cancel`` pair."""

    def __init__(self, schedule: ScheduleFn, cancel: CancelFn) -> None:
        """Store schedule/cancel functions and initialize the handle registry.

        Args:
            schedule: Function compatible with ``schedule(delay_ms, callback)``
                returning a cancellation token.
            cancel: Function accepting a token returned by ``schedule``.
        """
        self._schedule = schedule
        self._cancel = cancel
        self._handles: Dict[str, PollHandle] = {}

    def schedule(self, channel: str, delay_ms: int, callback: Callable[[], None]) -> None:
        """Schedule or reschedule the callback for a channel.

        A pending timer on the same channel is cancelled first, so repeated
        calls restart the delay.
        """
        delay = max(1, int(delay_ms))
        self.cancel(channel)
        handle = PollHandle(channel=channel, token=None)

        def _fire() -> None:
            if self._handles.get(channel) is handle:
                del self._handles[channel]
            callback()

        handle.token = self._schedule(delay, _fire)
        self._handles[channel] = handle

    def cancel(self, channel: str) -> None:
        handle = self._handles.pop(channel, None)
        if not handle:
            return
        try:
            self._cancel(handle.token)
        except Exception:
            LOGGER.debug("Timer for %s already gone", channel, exc_info=True)

    def cancel_all(self) -> None:
        """Cancel all pending timers across all channels."""
        for channel in list(self._handles.keys()):
            self.cancel(channel)

    def handle_for(self, channel: str) -> Optional[PollHandle]:
        """Return the current handle for a channel, if scheduled."""
        return self._handles.get(channel)


def asyncio_scheduler(loop: Optional[asyncio.AbstractEventLoop] = None) -> PollingScheduler:
    """Build a scheduler backed by ``loop.call_later``.

    When ``loop`` is omitted the running loop is looked up lazily on each
    schedule call, so the scheduler can be created before the loop starts.
    """

    def _schedule(delay_ms: int, callback: Callable[[], None]) -> asyncio.TimerHandle:
        target = loop or asyncio.get_running_loop()
        return target.call_later(delay_ms / 1000.0, callback)

    def _cancel(token: asyncio.TimerHandle) -> None:
        token.cancel()

    return PollingScheduler(_schedule, _cancel)


__all__ = ["PollHandle", "PollingScheduler", "asyncio_scheduler"]
