from __future__ import annotations

from typing import List, Optional

from acadash.app.polling_scheduler import PollingScheduler
from acadash.app.shared_store import CURRENT_ACADEMY_ID, SharedStore
from acadash.domain.derived import available_players
from acadash.domain.entities import Program, ProgramMember, UserSummary
from acadash.domain.ports import Notifier, ValidationError
from acadash.usecases.programs import ProgramUseCases
from acadash.viewmodels import forms
from acadash.viewmodels.base import DeleteConfirmation, FormDialog, OpFlag, ScreenVM

MAX_POINTS_DELTA = 100000


class ProgramMembersVM(ScreenVM):
    """Manage the players enrolled in one program at a time.

    Members are cleared when their reload fails; the player picker falls back
    to an empty list without a toast. Switching the current academy elsewhere
    reloads the programs and selects the first one again.
    """

    load_error_message = "Failed to load members"
    clear_on_error = True

    def __init__(
        self,
        usecases: ProgramUseCases,
        *,
        notifier: Notifier,
        store: Optional[SharedStore] = None,
        scheduler: Optional[PollingScheduler] = None,
        locale: str = "en",
    ) -> None:
        super().__init__(notifier=notifier, scheduler=scheduler, locale=locale)
        self.uc = usecases
        self.store = store

        self.programs: List[Program] = []
        self.players: List[UserSummary] = []
        self.members: List[ProgramMember] = []
        self.selected_program_id: Optional[str] = None
        self.search = ""

        self.loading_members = OpFlag(busy_label="Loading...")
        self.adding = OpFlag("Add", "Adding...")
        self.remove_confirm = DeleteConfirmation()
        self.note_dialog = FormDialog({"points_delta": "", "comment": ""}, submit_label="Save", busy_label="Saving...")

    @property
    def available_players(self) -> List[UserSummary]:
        return available_players(self.players, self.members, query=self.search)

    @property
    def selected_program(self) -> Optional[Program]:
        for program in self.programs:
            if program.id == self.selected_program_id:
                return program
        return None

    async def mount(self) -> None:
        if self.store is not None:
            self.watch_store(self.store, CURRENT_ACADEMY_ID, self._on_academy_change)
        await self.load()

    async def _on_academy_change(self, _academy_id) -> None:
        self.selected_program_id = None
        self.members = []
        await self.load()

    async def load(self) -> None:
        await self.load_programs()
        await self.load_players()

    async def load_programs(self) -> None:
        ok, programs = await self._run(self.loading, "Failed to load programs", self.uc.load_programs, locale=self.locale)
        if not ok:
            return
        self.programs = list(programs)
        if self.selected_program_id is None and self.programs:
            await self.select_program(self.programs[0].id)

    async def load_players(self) -> None:
        ok, players = await self._run_silent(self.uc.load_players, locale=self.locale)
        self.players = list(players) if ok else []

    async def select_program(self, program_id: str) -> None:
        self.selected_program_id = program_id
        await self.load_members()

    async def load_members(self) -> None:
        program_id = self.selected_program_id
        if not program_id:
            return
        ok, members = await self._run(
            self.loading_members, self.load_error_message, self.uc.load_members, program_id, locale=self.locale
        )
        if ok:
            self.members = list(members)
        elif self.clear_on_error and not self.scope.closed:
            self.members = []

    async def add_player(self, user_id: str) -> bool:
        program_id = self.selected_program_id
        if not program_id or self.adding.active:
            return False
        ok, _ = await self._run(self.adding, "Failed", self.uc.add_member, program_id, user_id, locale=self.locale)
        if not ok:
            return False
        self.succeed("Added")
        await self.load_members()
        return True

    def request_remove(self, user_id: str) -> None:
        self.remove_confirm.request(user_id)

    def cancel_remove(self) -> None:
        self.remove_confirm.cancel()

    async def confirm_remove(self) -> bool:
        program_id = self.selected_program_id
        user_id = self.remove_confirm.target_id
        if not program_id or user_id is None or self.remove_confirm.deleting.active:
            return False
        ok, _ = await self._run(
            self.remove_confirm.deleting, "Failed", self.uc.remove_member, program_id, user_id, locale=self.locale
        )
        if not ok:
            return False
        self.remove_confirm.cancel()
        self.succeed("Removed")
        await self.load_members()
        return True

    # ---------- coach note ----------

    def open_note(self, user_id: str) -> None:
        self.note_dialog.open(editing_id=user_id)

    def close_note(self) -> None:
        self.note_dialog.close()

    @staticmethod
    def _parse_note(values: dict) -> tuple:
        points = forms.parse_number(values.get("points_delta"), message="Invalid points", field="points_delta")
        if points is not None and abs(points) > MAX_POINTS_DELTA:
            raise ValidationError("Invalid points", field="points_delta")
        comment = forms.optional_text(values.get("comment"))
        if points is None and comment is None:
            raise ValidationError("Add a comment or points.")
        return points, comment

    async def submit_note(self) -> bool:
        dialog = self.note_dialog
        program_id = self.selected_program_id
        user_id = dialog.editing_id
        if not program_id or user_id is None or not dialog.submit_enabled:
            return False
        try:
            points, comment = self._parse_note(dialog.values)
        except ValidationError as exc:
            self.reject_invalid(exc)
            return False
        ok, _ = await self._run(
            dialog.submitting,
            "Failed",
            self.uc.add_coach_note,
            program_id,
            user_id,
            locale=self.locale,
            points_delta=points,
            comment=comment,
        )
        if not ok:
            return False
        self.succeed("Saved")
        dialog.close()
        await self.load_members()
        return True


__all__ = ["MAX_POINTS_DELTA", "ProgramMembersVM"]
