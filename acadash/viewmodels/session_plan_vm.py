from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

from acadash.app.polling_scheduler import PollingScheduler
from acadash.domain.entities import SessionActivity, SessionPlan
from acadash.domain.ports import Notifier, ValidationError
from acadash.usecases.courses import CourseUseCases, SessionPlanDraft
from acadash.viewmodels import forms
from acadash.viewmodels.base import OpFlag, ScreenVM

SESSION_STATUSES = ("planned", "in-progress", "completed", "cancelled")
ACTIVITY_TYPES = ("warmup", "drill", "game", "cooldown", "other")

# paired English/Arabic row lists
ROW_PAIRS = {"objectives": "objectives_ar", "materials": "materials_ar"}


def _empty_activity() -> Dict[str, Any]:
    return {"name": "", "name_ar": "", "duration": 10, "type": "drill", "description": "", "description_ar": ""}


class SessionPlanEditorVM(ScreenVM):
    """Edit one session plan of a course.

    Pass ``plan`` to edit a plan already in hand, or ``plan_id`` to fetch it
    on mount. Objective and material rows are kept as parallel English/Arabic
    lists and are added or removed together. On submit blank rows and activities missing
    either name are dropped before the plan is sent.
    """

    load_error_message = "Failed to load session plan"
    clear_on_error = False

    def __init__(
        self,
        usecases: CourseUseCases,
        *,
        course_id: str,
        notifier: Notifier,
        plan: Optional[SessionPlan] = None,
        plan_id: Optional[str] = None,
        session_number: int = 1,
        session_date: Optional[str] = None,
        scheduler: Optional[PollingScheduler] = None,
        locale: str = "en",
    ) -> None:
        super().__init__(notifier=notifier, scheduler=scheduler, locale=locale)
        self.uc = usecases
        self.course_id = course_id
        self.plan_id: Optional[str] = None
        self.saved: Optional[SessionPlan] = None
        self.saving = OpFlag("Save", "Saving...")
        if plan is not None:
            self._fill(plan)
        else:
            self.session_number = session_number
            self.values: Dict[str, Any] = {
                "session_date": session_date or date.today().isoformat(),
                "title": "",
                "title_ar": "",
                "description": "",
                "description_ar": "",
                "status": "planned",
                "notes": "",
                "notes_ar": "",
            }
            self.rows: Dict[str, List[str]] = {key: [""] for pair in ROW_PAIRS.items() for key in pair}
            self.activities: List[Dict[str, Any]] = [_empty_activity()]
            # filled from the server by load()
            self.plan_id = plan_id

    @property
    def is_edit(self) -> bool:
        return self.plan_id is not None

    def _fill(self, plan: SessionPlan) -> None:
        self.plan_id = plan.id
        self.session_number = plan.session_number
        self.values = {
            "session_date": plan.session_date,
            "title": plan.title,
            "title_ar": plan.title_ar,
            "description": plan.description,
            "description_ar": plan.description_ar,
            "status": plan.status,
            "notes": plan.notes,
            "notes_ar": plan.notes_ar,
        }
        self.rows = {
            "objectives": list(plan.objectives) or [""],
            "objectives_ar": list(plan.objectives_ar) or [""],
            "materials": list(plan.materials) or [""],
            "materials_ar": list(plan.materials_ar) or [""],
        }
        _pad(self.rows, "objectives", "objectives_ar")
        _pad(self.rows, "materials", "materials_ar")
        self.activities = [
            {
                "name": item.name,
                "name_ar": item.name_ar,
                "duration": item.duration,
                "type": item.type,
                "description": item.description,
                "description_ar": item.description_ar,
            }
            for item in plan.activities
        ]

    async def load(self) -> None:
        """Refresh an existing plan from the server; nothing to load on create."""
        if self.plan_id is None:
            return
        ok, plans = await self._run(self.loading, self.load_error_message, self.uc.load_session_plans, self.course_id)
        if not ok:
            return
        current = next((plan for plan in plans if plan.id == self.plan_id), None)
        if current is None:
            self.fail("Session plan not found")
            return
        self._fill(current)

    # ---------- field edits ----------

    def set(self, field: str, value: Any) -> None:
        if field not in self.values:
            raise KeyError(f"Unknown session plan field: {field}")
        self.values[field] = value

    def add_row(self, kind: str) -> None:
        """Append an empty English/Arabic row to ``objectives`` or ``materials``."""
        for key in (kind, ROW_PAIRS[kind]):
            self.rows[key].append("")

    def remove_row(self, kind: str, index: int) -> None:
        for key in (kind, ROW_PAIRS[kind]):
            del self.rows[key][index]

    def set_row(self, key: str, index: int, value: str) -> None:
        self.rows[key][index] = value

    def add_activity(self) -> None:
        self.activities.append(_empty_activity())

    def remove_activity(self, index: int) -> None:
        del self.activities[index]

    def set_activity(self, index: int, field: str, value: Any) -> None:
        if field not in self.activities[index]:
            raise KeyError(f"Unknown activity field: {field}")
        self.activities[index][field] = value

    # ---------- submit ----------

    def build_draft(self) -> SessionPlanDraft:
        values = self.values
        forms.require("Title is required", values.get("title"), values.get("title_ar"), field="title")
        status = values.get("status") or "planned"
        if status not in SESSION_STATUSES:
            raise ValidationError("Invalid session status", field="status")
        activities = []
        for row in self.activities:
            name, name_ar = forms.text(row.get("name")), forms.text(row.get("name_ar"))
            if not name or not name_ar:
                continue
            duration = forms.parse_int(
                row.get("duration"), message="Activity duration must be at least 1 minute", minimum=1
            )
            activities.append(
                SessionActivity(
                    name=name,
                    name_ar=name_ar,
                    duration=duration or 10,
                    type=row.get("type") if row.get("type") in ACTIVITY_TYPES else "other",
                    description=forms.text(row.get("description")),
                    description_ar=forms.text(row.get("description_ar")),
                )
            )
        return SessionPlanDraft(
            session_number=self.session_number,
            session_date=forms.text(values.get("session_date")),
            title=forms.text(values.get("title")),
            title_ar=forms.text(values.get("title_ar")),
            description=forms.text(values.get("description")),
            description_ar=forms.text(values.get("description_ar")),
            status=status,
            objectives=tuple(forms.clean_rows(self.rows["objectives"])),
            objectives_ar=tuple(forms.clean_rows(self.rows["objectives_ar"])),
            materials=tuple(forms.clean_rows(self.rows["materials"])),
            materials_ar=tuple(forms.clean_rows(self.rows["materials_ar"])),
            activities=tuple(activities),
            notes=forms.text(values.get("notes")),
            notes_ar=forms.text(values.get("notes_ar")),
        )

    async def submit(self) -> bool:
        if not self.saving.enabled:
            return False
        try:
            draft = self.build_draft()
        except ValidationError as exc:
            self.reject_invalid(exc)
            return False
        if self.plan_id is not None:
            ok, _ = await self._run(
                self.saving, "Failed to save. Please try again.", self.uc.update_session_plan, self.plan_id, draft
            )
        else:
            ok, plan = await self._run(
                self.saving,
                "Failed to save. Please try again.",
                self.uc.create_session_plan,
                self.course_id,
                draft,
            )
            if ok:
                self.saved = plan
                self.plan_id = plan.id
        if ok:
            self.succeed("Session plan saved")
        return ok


def _pad(rows: Dict[str, List[str]], left: str, right: str) -> None:
    size = max(len(rows[left]), len(rows[right]))
    for key in (left, right):
        rows[key].extend([""] * (size - len(rows[key])))


__all__ = ["ACTIVITY_TYPES", "SESSION_STATUSES", "SessionPlanEditorVM"]
