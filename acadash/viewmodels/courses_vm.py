"""Course list and course form controllers.

``CoursesVM`` shows the catalogue with its categories and applies the
active toggle and deletes optimistically. ``CourseFormVM`` backs the create
and edit pages; when session plans are queued with the new course it runs the
bulk flow and reports a partially created course by id.
"""

from __future__ import annotations

import asyncio
from dataclasses import replace
from typing import Any, Dict, List, Optional

from acadash.app.polling_scheduler import PollingScheduler
from acadash.domain.entities import Category, Course, SessionPlan
from acadash.domain.ports import Notifier, ValidationError
from acadash.usecases.courses import CourseDraft, CourseUseCases, PartialCourseCreation, SessionPlanDraft
from acadash.viewmodels import forms
from acadash.viewmodels.base import DeleteConfirmation, FormDialog, OptimisticChange, ScreenVM

COURSE_FORM_DEFAULTS: Dict[str, Any] = {
    "name": "",
    "name_ar": "",
    "description": "",
    "description_ar": "",
    "price": 0,
    "currency": "OMR",
    "duration": 1,
    "max_students": 0,
    "category_id": "",
    "is_active": True,
}


class CoursesVM(ScreenVM):
    load_error_message = "Failed to load courses"
    clear_on_error = False

    def __init__(
        self,
        usecases: CourseUseCases,
        *,
        notifier: Notifier,
        scheduler: Optional[PollingScheduler] = None,
        locale: str = "en",
    ) -> None:
        super().__init__(notifier=notifier, scheduler=scheduler, locale=locale)
        self.uc = usecases
        self.courses: List[Course] = []
        self.categories: List[Category] = []
        self.search = ""
        self.delete = DeleteConfirmation()

    @property
    def visible_courses(self) -> List[Course]:
        needle = self.search.strip().lower()
        if not needle:
            return list(self.courses)
        return [
            course
            for course in self.courses
            if needle in course.name.lower() or needle in (course.name_ar or "").lower()
        ]

    def category_name(self, category_id: Optional[str]) -> str:
        for category in self.categories:
            if category.id == category_id:
                return category.name_ar if self.locale == "ar" and category.name_ar else category.name
        return ""

    async def load(self) -> None:
        (ok, courses), (cat_ok, categories) = await asyncio.gather(
            self._run(self.loading, self.load_error_message, self.uc.load),
            self._run(None, "Failed to load categories", self.uc.load_categories),
        )
        if ok:
            self.courses = list(courses)
        elif self.clear_on_error and not self.scope.closed:
            self.courses = []
        if cat_ok:
            self.categories = list(categories)

    async def toggle_active(self, course_id: str) -> bool:
        course = next((item for item in self.courses if item.id == course_id), None)
        if course is None:
            return False
        change = OptimisticChange(self.courses, [course_id], lambda item: replace(item, is_active=not item.is_active))
        self.courses = change.applied
        ok, _ = await self._run(None, "Failed to update course", self.uc.set_active, course_id, not course.is_active)
        if not ok:
            if not self.scope.closed:
                self.courses = change.undo(self.courses)
            return False
        self.succeed("Saved")
        return True

    def request_delete(self, course_id: str) -> None:
        self.delete.request(course_id)

    def cancel_delete(self) -> None:
        self.delete.cancel()

    async def confirm_delete(self) -> bool:
        course_id = self.delete.target_id
        if course_id is None or not self.delete.deleting.enabled:
            return False
        change = OptimisticChange(self.courses, [course_id], lambda item: None)
        self.courses = change.applied
        ok, _ = await self._run(self.delete.deleting, "Failed to delete course", self.uc.delete, course_id)
        if not ok:
            if not self.scope.closed:
                self.courses = change.undo(self.courses)
            return False
        self.delete.cancel()
        self.succeed("Deleted")
        await self.load()
        return True


class CourseFormVM(ScreenVM):
    """Create or edit one course.

    Queued session drafts are only used on create; they are sent after the
    course, in order, and a failure leaves the course in place.
    """

    load_error_message = "Failed to load categories"
    clear_on_error = False

    def __init__(
        self,
        usecases: CourseUseCases,
        *,
        notifier: Notifier,
        course: Optional[Course] = None,
        scheduler: Optional[PollingScheduler] = None,
        locale: str = "en",
    ) -> None:
        super().__init__(notifier=notifier, scheduler=scheduler, locale=locale)
        self.uc = usecases
        self.categories: List[Category] = []
        self.sessions: List[SessionPlanDraft] = []
        self.saved_course: Optional[Course] = None
        self.partial_course_id: Optional[str] = None
        self.session_plans: List[SessionPlan] = []
        self.session_form = FormDialog(
            {"session_date": "", "title": "", "title_ar": ""}, submit_label="Add session", busy_label="Adding..."
        )
        self.session_form.open()
        if course is None:
            self.form = FormDialog(COURSE_FORM_DEFAULTS, submit_label="Create", busy_label="Creating...")
            self.form.open()
        else:
            self.form = FormDialog(COURSE_FORM_DEFAULTS, submit_label="Save", busy_label="Saving...")
            self.form.open(_course_values(course), editing_id=course.id)

    @property
    def is_edit(self) -> bool:
        return self.form.editing_id is not None

    @property
    def next_session_number(self) -> int:
        numbers = [plan.session_number for plan in self.session_plans]
        return max(numbers, default=0) + 1

    async def load(self) -> None:
        ok, categories = await self._run(self.loading, self.load_error_message, self.uc.load_categories)
        if ok:
            self.categories = list(categories)
        if self.is_edit:
            ok, plans = await self._run_silent(self.uc.load_session_plans, self.form.editing_id)
            self.session_plans = sorted(plans, key=lambda plan: plan.session_number) if ok else []

    def queue_session(self, draft: SessionPlanDraft) -> None:
        self.sessions.append(draft)

    def add_queued_session(self) -> bool:
        """Queue the session typed into ``session_form`` as the next numbered plan."""
        values = self.session_form.values
        try:
            forms.require("Title is required", values.get("title"), values.get("title_ar"), field="title")
            forms.require("Session date is required", values.get("session_date"), field="session_date")
        except ValidationError as exc:
            self.reject_invalid(exc)
            return False
        self.queue_session(
            SessionPlanDraft(
                session_number=len(self.sessions) + 1,
                session_date=forms.text(values.get("session_date")),
                title=forms.text(values.get("title")),
                title_ar=forms.text(values.get("title_ar")),
            )
        )
        self.session_form.open()
        return True

    def remove_session(self, index: int) -> None:
        del self.sessions[index]
        self.sessions = [replace(draft, session_number=number) for number, draft in enumerate(self.sessions, 1)]

    def build_draft(self) -> CourseDraft:
        """Validate the form and return a draft; raises ``ValidationError``."""
        values = self.form.values
        forms.require("Name and Arabic name are required", values.get("name"), values.get("name_ar"))
        price = forms.parse_number(values.get("price"), message="Price must be zero or more", field="price")
        if price is None or price < 0:
            raise ValidationError("Price must be zero or more", field="price")
        duration = forms.parse_int(
            values.get("duration"), message="Duration must be at least 1", minimum=1, field="duration"
        )
        if duration is None:
            raise ValidationError("Duration must be at least 1", field="duration")
        max_students = forms.parse_int(
            values.get("max_students"), message="Invalid maximum students", minimum=0, field="max_students"
        )
        return CourseDraft(
            name=forms.text(values.get("name")),
            name_ar=forms.text(values.get("name_ar")),
            price=price,
            duration=duration,
            description=forms.optional_text(values.get("description")),
            description_ar=forms.optional_text(values.get("description_ar")),
            currency=forms.text(values.get("currency")) or "OMR",
            max_students=max_students or None,
            category_id=forms.optional_text(values.get("category_id")),
            is_active=bool(values.get("is_active")) if self.is_edit else None,
        )

    async def submit(self) -> bool:
        form = self.form
        if not form.submit_enabled:
            return False
        try:
            draft = self.build_draft()
        except ValidationError as exc:
            self.reject_invalid(exc)
            return False

        if self.is_edit:
            ok, _ = await self._run(
                form.submitting, "Failed to update course", self.uc.update, form.editing_id, draft
            )
            if ok:
                self.succeed("Course updated")
            return ok

        if not self.sessions:
            ok, course = await self._run(form.submitting, "Failed to create course", self.uc.create, draft)
            if ok:
                self.saved_course = course
                self.succeed("Course created")
            return ok

        ok, outcome = await self._run(
            form.submitting, "Failed to create course", self._create_with_sessions, draft, list(self.sessions)
        )
        if not ok:
            return False
        if isinstance(outcome, PartialCourseCreation):
            self.partial_course_id = outcome.course_id
            self.fail(f"Course {outcome.course_id} was created but its sessions are incomplete: {outcome.cause.message}")
            return False
        self.saved_course = outcome.course
        self.sessions = []
        self.succeed("Course created")
        return True

    def _create_with_sessions(self, draft: CourseDraft, sessions: List[SessionPlanDraft]) -> Any:
        try:
            return self.uc.create_with_sessions(draft, sessions)
        except PartialCourseCreation as exc:
            return exc


def _course_values(course: Course) -> Dict[str, Any]:
    return {
        "name": course.name,
        "name_ar": course.name_ar,
        "description": course.description or "",
        "description_ar": course.description_ar or "",
        "price": course.price,
        "currency": course.currency,
        "duration": course.duration,
        "max_students": course.max_students or 0,
        "category_id": course.category_id or "",
        "is_active": course.is_active,
    }


__all__ = ["COURSE_FORM_DEFAULTS", "CourseFormVM", "CoursesVM"]
