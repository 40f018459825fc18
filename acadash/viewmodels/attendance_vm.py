"""Coach attendance sheet with debounced auto-save.

Toggling a player or editing a note updates the sheet immediately and
restarts an idle timer. When the timer fires the whole sheet for the selected
program and session date is saved in one call. Only one save is in flight at
a time; a save requested meanwhile runs once, right after it. Each queued save
carries the program and date it was edited under, and changing either waits
for queued and running saves first. A failed save keeps the local edits on
screen.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from datetime import date, datetime, timezone
from typing import Callable, Dict, List, Optional, Tuple

from acadash.app.debounce import Debouncer
from acadash.app.polling_scheduler import PollingScheduler
from acadash.app.shared_store import CURRENT_ACADEMY_ID, SharedStore
from acadash.domain.derived import AttendanceStats, attendance_stats
from acadash.domain.entities import AttendanceRecord, AttendanceSummary, Program, ProgramMember
from acadash.domain.ports import Notifier, ValidationError
from acadash.usecases.attendance import AttendanceUseCases
from acadash.usecases.programs import ProgramUseCases
from acadash.viewmodels import forms
from acadash.viewmodels.base import FormDialog, OpFlag, ScreenVM

LOGGER = logging.getLogger(__name__)

AUTOSAVE_CHANNEL = "attendance:autosave"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class _SheetSnapshot:
    program_id: str
    session_date: str
    entries: Tuple[AttendanceRecord, ...]


class AttendanceVM(ScreenVM):
    load_error_message = "Failed to load attendance"
    clear_on_error = True

    def __init__(
        self,
        programs: ProgramUseCases,
        attendance: AttendanceUseCases,
        *,
        notifier: Notifier,
        store: Optional[SharedStore] = None,
        scheduler: Optional[PollingScheduler] = None,
        locale: str = "en",
        autosave_idle_ms: int = 1500,
        session_date: Optional[str] = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        super().__init__(notifier=notifier, scheduler=scheduler, locale=locale)
        self.uc_programs = programs
        self.uc_attendance = attendance
        self.store = store
        self._clock = clock

        self.programs: List[Program] = []
        self.members: List[ProgramMember] = []
        self.selected_program_id: Optional[str] = None
        self.session_date = session_date or date.today().isoformat()
        self.attendance: Dict[str, AttendanceRecord] = {}
        self.summary_by_user: Dict[str, AttendanceSummary] = {}

        self.saving = OpFlag("Save", "Saving...")
        self.last_saved: Optional[datetime] = None
        self._queued: Optional[_SheetSnapshot] = None
        self._flush_done: Optional[asyncio.Future] = None
        self.autosave = Debouncer(self.scope, AUTOSAVE_CHANNEL, autosave_idle_ms, self._on_idle)

        self.badge_dialog = FormDialog({"badge_id": "", "notes": ""}, submit_label="Grant", busy_label="Granting...")

    # ---------- derived ----------

    @property
    def stats(self) -> AttendanceStats:
        return attendance_stats(self.members, self.attendance)

    def record_for(self, user_id: str) -> AttendanceRecord:
        return self.attendance.get(user_id) or AttendanceRecord(user_id=user_id)

    # ---------- loads ----------

    async def mount(self) -> None:
        if self.store is not None:
            self.watch_store(self.store, CURRENT_ACADEMY_ID, self._on_academy_change)
        await self.load()

    async def _on_academy_change(self, _academy_id) -> None:
        await self._settle_pending()
        self.selected_program_id = None
        self.members = []
        self.attendance = {}
        await self.load()

    async def load(self) -> None:
        ok, programs = await self._run(
            self.loading, "Failed to load programs", self.uc_programs.load_programs, locale=self.locale
        )
        if not ok:
            return
        self.programs = list(programs)
        if self.selected_program_id is None and self.programs:
            self.selected_program_id = self.programs[0].id
        await self._load_program()

    async def select_program(self, program_id: str) -> None:
        await self._settle_pending()
        self.selected_program_id = program_id
        await self._load_program()

    async def select_date(self, session_date: str) -> None:
        await self._settle_pending()
        self.session_date = session_date
        await self.load_attendance()

    async def _load_program(self) -> None:
        program_id = self.selected_program_id
        if not program_id:
            return
        ok, members = await self._run(
            self.loading, "Failed to load members", self.uc_programs.load_members, program_id, locale=self.locale
        )
        if program_id != self.selected_program_id:
            return
        if ok:
            self.members = list(members)
        elif not self.scope.closed:
            self.members = []
        await self.load_attendance()
        await self.load_summary()

    async def load_attendance(self) -> None:
        program_id = self.selected_program_id
        session_date = self.session_date
        if not program_id or not self.members:
            self.attendance = {}
            return
        ok, records = await self._run(
            self.loading,
            self.load_error_message,
            self.uc_attendance.load,
            program_id,
            session_date,
            locale=self.locale,
        )
        if (program_id, session_date) != (self.selected_program_id, self.session_date):
            return
        if not ok:
            if self.clear_on_error and not self.scope.closed:
                self.attendance = {}
            return
        sheet = {member.user_id: AttendanceRecord(user_id=member.user_id) for member in self.members}
        for record in records:
            sheet[record.user_id] = record
        self.attendance = sheet

    async def load_summary(self) -> None:
        program_id = self.selected_program_id
        if not program_id or not self.members:
            self.summary_by_user = {}
            return
        ok, summary = await self._run_silent(self.uc_attendance.load_summary, program_id, locale=self.locale)
        if ok:
            self.summary_by_user = dict(summary)

    # ---------- edits ----------

    def toggle_present(self, user_id: str) -> None:
        record = self.record_for(user_id)
        self.attendance[user_id] = replace(record, present=not record.present)
        self._queue_sheet()
        self.autosave.trigger()

    def set_notes(self, user_id: str, notes: str) -> None:
        record = self.record_for(user_id)
        self.attendance[user_id] = replace(record, notes=forms.optional_text(notes))
        self._queue_sheet()
        self.autosave.trigger()

    def _queue_sheet(self) -> None:
        """Pin the sheet to the program and date it was edited under."""
        program_id = self.selected_program_id
        if not program_id or not self.members:
            return
        entries = tuple(self.record_for(member.user_id) for member in self.members)
        self._queued = _SheetSnapshot(program_id, self.session_date, entries)

    # ---------- saving ----------

    def _on_idle(self) -> None:
        self.scope.spawn(self.flush())

    async def save_now(self) -> None:
        self.autosave.cancel()
        if self._queued is None:
            self._queue_sheet()
        await self.flush()

    async def flush(self) -> None:
        """Save queued sheets; a call made while a save is running is queued once."""
        if self._flush_done is not None:
            return
        self._flush_done = asyncio.get_running_loop().create_future()
        try:
            while self._queued is not None and not self.scope.closed:
                snapshot, self._queued = self._queued, None
                await self._save_once(snapshot)
        finally:
            done, self._flush_done = self._flush_done, None
            done.set_result(None)

    async def _save_once(self, snapshot: _SheetSnapshot) -> None:
        ok, _ = await self._run(
            self.saving,
            "Failed to save attendance",
            self.uc_attendance.save,
            snapshot.program_id,
            snapshot.session_date,
            list(snapshot.entries),
            locale=self.locale,
        )
        if ok:
            self.last_saved = self._clock()
            LOGGER.debug(
                "Attendance saved for %s on %s (%d rows)",
                snapshot.program_id,
                snapshot.session_date,
                len(snapshot.entries),
            )

    async def _settle_pending(self) -> None:
        """Send queued edits and wait out any running save before the selection moves."""
        self.autosave.cancel()
        await self.flush()
        while self._flush_done is not None:
            await asyncio.shield(self._flush_done)

    # ---------- badges ----------

    def open_badge(self, user_id: str) -> None:
        self.badge_dialog.open(editing_id=user_id)

    def close_badge(self) -> None:
        self.badge_dialog.close()

    async def submit_badge(self) -> bool:
        dialog = self.badge_dialog
        user_id = dialog.editing_id
        if user_id is None or not dialog.submit_enabled:
            return False
        badge_id = forms.text(dialog.get("badge_id"))
        if not badge_id:
            self.reject_invalid(ValidationError("Please select a badge", field="badge_id"))
            return False
        member = next((item for item in self.members if item.user_id == user_id), None)
        academy_id = member.academy_id if member else ""
        ok, _ = await self._run(
            dialog.submitting,
            "Failed to grant badge",
            self.uc_programs.grant_badge,
            academy_id=academy_id,
            user_id=user_id,
            badge_id=badge_id,
            locale=self.locale,
            notes=forms.optional_text(dialog.get("notes")),
        )
        if not ok:
            return False
        self.succeed("Badge granted")
        dialog.close()
        return True


__all__ = ["AUTOSAVE_CHANNEL", "AttendanceVM"]
