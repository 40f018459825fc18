"""Shared machinery for the load-display-mutate screen controllers.

``ScreenVM`` gives every screen the same contract:

* ``mount()`` issues the initial reads, ``unmount()`` closes the lifetime
  scope so late results and pending timers are dropped;
* reads and writes run off the event loop through ``asyncio.to_thread`` and
  hold an ``OpFlag`` (``loading``/``submitting``) for their duration;
* business rejections are shown verbatim, transport failures are logged and
  replaced by the screen's generic message.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import contextmanager
from typing import Any, Callable, Coroutine, Dict, Iterable, Iterator, List, Optional, Set, Tuple

from acadash.app.polling_scheduler import PollHandle, PollingScheduler
from acadash.app.shared_store import SharedStore
from acadash.domain.ports import ActionRejected, Notifier, UseCaseError, ValidationError

LOGGER = logging.getLogger(__name__)


class OpFlag:
    """In-flight flag bound to one async operation.

    While active the bound control is disabled and shows ``busy_label``.
    """

    def __init__(self, idle_label: str = "", busy_label: str = "Loading...") -> None:
        self.idle_label = idle_label
        self.busy_label = busy_label
        self.active = False

    def __bool__(self) -> bool:
        return self.active

    @property
    def enabled(self) -> bool:
        return not self.active

    @property
    def label(self) -> str:
        return self.busy_label if self.active else self.idle_label

    @contextmanager
    def hold(self) -> Iterator[None]:
        self.active = True
        try:
            yield
        finally:
            self.active = False


class LifetimeScope:
    """Bind tasks and timers to the lifetime of one mounted screen."""

    _counter = 0

    def __init__(self, scheduler: Optional[PollingScheduler] = None) -> None:
        LifetimeScope._counter += 1
        self._prefix = f"scope{LifetimeScope._counter}"
        self.scheduler = scheduler
        self._tasks: Set[asyncio.Task] = set()
        self._channels: Set[str] = set()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def spawn(self, coro: Coroutine[Any, Any, Any]) -> Optional[asyncio.Task]:
        """Start ``coro`` as a task owned by this scope; no-op once closed."""
        if self._closed:
            coro.close()
            return None
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def schedule(self, channel: str, delay_ms: int, callback: Callable[[], None]) -> None:
        """Schedule ``callback`` on a scope-local channel of the shared scheduler."""
        if self._closed or self.scheduler is None:
            return
        key = self._key(channel)
        self._channels.add(key)

        def _guarded() -> None:
            if not self._closed:
                callback()

        self.scheduler.schedule(key, delay_ms, _guarded)

    def cancel(self, channel: str) -> None:
        if self.scheduler is not None:
            self.scheduler.cancel(self._key(channel))

    def handle_for(self, channel: str) -> Optional[PollHandle]:
        if self.scheduler is None:
            return None
        return self.scheduler.handle_for(self._key(channel))

    def close(self) -> None:
        self._closed = True
        if self.scheduler is not None:
            for key in self._channels:
                self.scheduler.cancel(key)
        self._channels.clear()
        for task in list(self._tasks):
            task.cancel()

    async def drain(self) -> None:
        """Wait for every task spawned so far (used by tests and shutdown)."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _key(self, channel: str) -> str:
        return f"{self._prefix}:{channel}"


_FAILED = object()


class ScreenVM:
    """Base for screen controllers.

    Subclasses set ``load_error_message`` (generic text for failed reads) and
    ``clear_on_error`` (whether a failed read empties the collection or keeps
    the last good data).
    """

    load_error_message = "Failed to load data."
    clear_on_error = False

    def __init__(
        self,
        *,
        notifier: Notifier,
        scheduler: Optional[PollingScheduler] = None,
        locale: str = "en",
    ) -> None:
        self.notifier = notifier
        self.locale = locale
        self.scope = LifetimeScope(scheduler)
        self.loading = OpFlag(busy_label="Loading...")
        self.last_error: Optional[str] = None
        self._unsubscribers: List[Callable[[], None]] = []

    # ---------- lifecycle ----------

    async def mount(self) -> None:
        await self.load()

    def unmount(self) -> None:
        self.scope.close()
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

    def watch_store(
        self, store: SharedStore, key: str, on_change: Callable[[Any], Coroutine[Any, Any, Any]]
    ) -> None:
        """Run ``on_change`` in the screen scope for values published after this call."""
        subscribing = True

        def _deliver(value: Any) -> None:
            if not subscribing:
                self.scope.spawn(on_change(value))

        self._unsubscribers.append(store.subscribe(key, _deliver))
        subscribing = False

    async def load(self) -> None:
        raise NotImplementedError

    # ---------- call helpers ----------

    async def _run(
        self,
        flag: Optional[OpFlag],
        fallback: str,
        fn: Callable[..., Any],
        *args: Any,
        **kwargs: Any,
    ) -> Tuple[bool, Any]:
        """Run a blocking use case off the loop and report failures.

        Returns ``(ok, result)``. ``ok`` is ``False`` when the call failed or
        when the scope closed while it was in flight.
        """
        if self.scope.closed:
            return False, None
        result: Any = _FAILED
        if flag is not None:
            with flag.hold():
                result = await self._invoke(fallback, fn, *args, **kwargs)
        else:
            result = await self._invoke(fallback, fn, *args, **kwargs)
        if result is _FAILED or self.scope.closed:
            return False, None
        return True, result

    async def _invoke(self, fallback: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        try:
            return await asyncio.to_thread(fn, *args, **kwargs)
        except ActionRejected as exc:
            self.fail(exc.server_message or fallback)
        except UseCaseError as exc:
            if not self.scope.closed:
                LOGGER.exception("%s failed (%s)", type(fn).__name__, exc.code)
            self.fail(fallback)
        return _FAILED

    async def _run_silent(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Tuple[bool, Any]:
        """Like ``_run`` but failures are only logged (secondary reads)."""
        if self.scope.closed:
            return False, None
        try:
            result = await asyncio.to_thread(fn, *args, **kwargs)
        except UseCaseError as exc:
            LOGGER.warning("%s failed quietly: %s", type(fn).__name__, exc.message)
            return False, None
        if self.scope.closed:
            return False, None
        return True, result

    # ---------- notifications ----------

    def fail(self, message: str) -> None:
        if self.scope.closed:
            return
        self.last_error = message
        self.notifier.error(message)

    def succeed(self, message: str) -> None:
        if self.scope.closed:
            return
        self.last_error = None
        self.notifier.success(message)

    def reject_invalid(self, exc: ValidationError) -> None:
        """Surface a local validation failure; no action was called."""
        self.fail(exc.message)


class FormDialog:
    """Open/closed dialog owning a copy of form values and a submit flag.

    Form values are a plain mapping initialised from defaults (create) or an
    entity (edit); they never alias the screen's collection.
    """

    def __init__(self, defaults: dict, *, submit_label: str = "Save", busy_label: str = "Saving...") -> None:
        self._defaults = dict(defaults)
        self.values: dict = dict(defaults)
        self.is_open = False
        self.editing_id: Optional[str] = None
        self.submitting = OpFlag(submit_label, busy_label)

    @property
    def submit_enabled(self) -> bool:
        return self.submitting.enabled

    @property
    def submit_label(self) -> str:
        return self.submitting.label

    def open(self, initial: Optional[dict] = None, *, editing_id: Optional[str] = None) -> None:
        self.values = dict(self._defaults)
        if initial:
            self.values.update(initial)
        self.editing_id = editing_id
        self.is_open = True

    def set(self, field: str, value: Any) -> None:
        if field not in self._defaults:
            raise KeyError(f"Unknown form field: {field}")
        self.values[field] = value

    def get(self, field: str) -> Any:
        return self.values.get(field)

    def close(self) -> None:
        self.is_open = False
        self.editing_id = None
        self.values = dict(self._defaults)


class OptimisticChange:
    """One optimistic edit to a list of items keyed by ``id``.

    ``change`` returns the replacement item, or ``None`` to drop it. ``undo``
    puts back only the items this edit touched, so other edits that landed in
    the meantime survive a rollback.
    """

    def __init__(self, items: Iterable[Any], ids: Iterable[str], change: Callable[[Any], Any]) -> None:
        targets = set(ids)
        self.replaced: Dict[str, Any] = {}
        self.removed: List[Tuple[int, Any]] = []
        self.applied: List[Any] = []
        for index, item in enumerate(items):
            if item.id not in targets:
                self.applied.append(item)
                continue
            updated = change(item)
            if updated is None:
                self.removed.append((index, item))
            else:
                self.replaced[item.id] = item
                self.applied.append(updated)

    def undo(self, current: Iterable[Any]) -> List[Any]:
        restored = [self.replaced.get(item.id, item) for item in current]
        present = {item.id for item in restored}
        for index, item in self.removed:
            if item.id not in present:
                restored.insert(min(index, len(restored)), item)
        return restored


class DeleteConfirmation:
    """Two-step delete: ``request`` remembers the target, ``confirm`` acts."""

    def __init__(self) -> None:
        self.target_id: Optional[str] = None
        self.deleting = OpFlag("Delete", "Deleting...")

    @property
    def is_open(self) -> bool:
        return self.target_id is not None

    def request(self, target_id: str) -> None:
        self.target_id = target_id

    def cancel(self) -> None:
        self.target_id = None


__all__ = ["DeleteConfirmation", "FormDialog", "LifetimeScope", "OpFlag", "OptimisticChange", "ScreenVM"]
