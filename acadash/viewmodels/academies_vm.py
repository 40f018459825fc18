from __future__ import annotations

from typing import Dict, List, Optional

from acadash.app.polling_scheduler import PollingScheduler
from acadash.app.shared_store import CURRENT_ACADEMY_ID, SharedStore
from acadash.domain.derived import ManagerFilter, StatusFilter, filter_academies
from acadash.domain.entities import Academy, ManagerSummary, UserSummary
from acadash.domain.ports import Notifier, ValidationError
from acadash.usecases.academies import AcademyDraft, AcademyUseCases
from acadash.viewmodels import forms
from acadash.viewmodels.base import DeleteConfirmation, FormDialog, OpFlag, ScreenVM

ACADEMY_FORM_DEFAULTS = {"name": "", "name_ar": "", "slug": "", "image": "", "is_active": True}


class AcademiesVM(ScreenVM):
    """Admin academy list with create/edit/delete, manager assignment and switching.

    A failed reload keeps the previous list on screen.
    """

    load_error_message = "Failed to load academies"
    clear_on_error = False

    def __init__(
        self,
        usecases: AcademyUseCases,
        *,
        notifier: Notifier,
        store: Optional[SharedStore] = None,
        scheduler: Optional[PollingScheduler] = None,
        locale: str = "en",
    ) -> None:
        super().__init__(notifier=notifier, scheduler=scheduler, locale=locale)
        self.uc = usecases
        self.store = store

        self.academies: List[Academy] = []
        self.managers_by_academy: Dict[str, Optional[ManagerSummary]] = {}
        self.query = ""
        self.status_filter: StatusFilter = "all"
        self.manager_filter: ManagerFilter = "all"

        self.create_dialog = FormDialog(ACADEMY_FORM_DEFAULTS, submit_label="Create", busy_label="Creating...")
        self.edit_dialog = FormDialog(ACADEMY_FORM_DEFAULTS, submit_label="Save", busy_label="Saving...")
        self.delete_confirm = DeleteConfirmation()

        self.assign_dialog = FormDialog({"user_id": ""}, submit_label="Assign", busy_label="Assigning...")
        self.assign_academy_id: Optional[str] = None
        self.eligible_managers: List[UserSummary] = []
        self.eligible_loaded = False
        self.eligible_loading = OpFlag(busy_label="Loading...")
        self.switching = OpFlag("Set current", "Switching...")

    # ---------- derived ----------

    @property
    def visible_academies(self) -> List[Academy]:
        return filter_academies(
            self.academies,
            self.managers_by_academy,
            query=self.query,
            status=self.status_filter,
            manager=self.manager_filter,
        )

    @property
    def is_empty(self) -> bool:
        return not self.loading.active and not self.academies

    def manager_for(self, academy_id: str) -> Optional[ManagerSummary]:
        return self.managers_by_academy.get(academy_id)

    # ---------- load ----------

    async def load(self) -> None:
        ok, listing = await self._run(self.loading, self.load_error_message, self.uc.load)
        if ok:
            self.academies = list(listing.academies)
            self.managers_by_academy = dict(listing.managers_by_academy)
        elif self.clear_on_error and not self.scope.closed:
            self.academies = []
            self.managers_by_academy = {}

    # ---------- create / edit ----------

    def open_create(self) -> None:
        self.create_dialog.open()

    def open_edit(self, academy: Academy) -> None:
        self.edit_dialog.open(
            {
                "name": academy.name,
                "name_ar": academy.name_ar,
                "slug": academy.slug,
                "image": academy.image or "",
                "is_active": academy.is_active,
            },
            editing_id=academy.id,
        )

    @staticmethod
    def _draft(values: dict, *, include_active: bool) -> AcademyDraft:
        forms.require("Name and Arabic name are required", values.get("name"), values.get("name_ar"))
        return AcademyDraft(
            name=forms.text(values.get("name")),
            name_ar=forms.text(values.get("name_ar")),
            slug=forms.optional_text(values.get("slug")),
            image=forms.optional_text(values.get("image")),
            is_active=bool(values.get("is_active")) if include_active else None,
        )

    async def submit_create(self) -> bool:
        dialog = self.create_dialog
        if not dialog.submit_enabled:
            return False
        try:
            draft = self._draft(dialog.values, include_active=False)
        except ValidationError as exc:
            self.reject_invalid(exc)
            return False
        ok, _ = await self._run(dialog.submitting, "Failed to create academy", self.uc.create, draft)
        if not ok:
            return False
        self.succeed("Academy created successfully")
        dialog.close()
        await self.load()
        return True

    async def submit_update(self) -> bool:
        dialog = self.edit_dialog
        academy_id = dialog.editing_id
        if academy_id is None or not dialog.submit_enabled:
            return False
        try:
            draft = self._draft(dialog.values, include_active=True)
        except ValidationError as exc:
            self.reject_invalid(exc)
            return False
        ok, _ = await self._run(dialog.submitting, "Failed to update academy", self.uc.update, academy_id, draft)
        if not ok:
            return False
        self.succeed("Academy updated successfully")
        dialog.close()
        await self.load()
        return True

    # ---------- delete ----------

    def request_delete(self, academy_id: str) -> None:
        self.delete_confirm.request(academy_id)

    def cancel_delete(self) -> None:
        self.delete_confirm.cancel()

    async def confirm_delete(self) -> bool:
        academy_id = self.delete_confirm.target_id
        if academy_id is None or self.delete_confirm.deleting.active:
            return False
        ok, _ = await self._run(
            self.delete_confirm.deleting, "Failed to delete academy", self.uc.delete, academy_id
        )
        if not ok:
            return False
        self.delete_confirm.cancel()
        self.succeed("Academy deleted successfully")
        await self.load()
        return True

    # ---------- manager assignment ----------

    async def open_assign(self, academy_id: str) -> None:
        self.assign_academy_id = academy_id
        self.assign_dialog.open()
        if self.eligible_loaded:
            return
        ok, users = await self._run(
            self.eligible_loading, "Failed to load eligible managers", self.uc.load_eligible_managers
        )
        if ok:
            self.eligible_managers = list(users)
            self.eligible_loaded = True

    def close_assign(self) -> None:
        self.assign_dialog.close()
        self.assign_academy_id = None

    async def submit_assign(self) -> bool:
        dialog = self.assign_dialog
        academy_id = self.assign_academy_id
        if academy_id is None or not dialog.submit_enabled:
            return False
        user_id = forms.text(dialog.get("user_id"))
        if not user_id:
            self.reject_invalid(ValidationError("Please select a user", field="user_id"))
            return False
        ok, _ = await self._run(
            dialog.submitting, "Failed to assign manager", self.uc.assign_manager, academy_id, user_id
        )
        if not ok:
            return False
        self.succeed("Manager assigned successfully")
        self.close_assign()
        await self.load()
        return True

    # ---------- current academy ----------

    async def set_current(self, academy_id: str) -> bool:
        if self.switching.active:
            return False
        ok, _ = await self._run(
            self.switching, "Failed to set current academy", self.uc.set_current, academy_id, locale=self.locale
        )
        if not ok:
            return False
        if self.store is not None:
            self.store.publish(CURRENT_ACADEMY_ID, academy_id)
        self.succeed("Current academy updated")
        return True


__all__ = ["ACADEMY_FORM_DEFAULTS", "AcademiesVM"]
