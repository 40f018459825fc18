"""Course catalogue, categories and session plan use cases."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from acadash.adapters.action_schemas import CategoryWire, CourseWire, SessionPlanWire, parse_many, parse_one
from acadash.domain.entities import Category, Course, SessionActivity, SessionPlan
from acadash.domain.ports import ActionPort, UseCaseError
from acadash.usecases.invoke_action import call_action, parse_payload

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class CourseDraft:
    """Validated course form values; ``None`` fields are omitted."""

    name: str
    name_ar: str
    price: float
    duration: int
    description: Optional[str] = None
    description_ar: Optional[str] = None
    currency: str = "OMR"
    max_students: Optional[int] = None
    category_id: Optional[str] = None
    is_active: Optional[bool] = None


@dataclass(frozen=True)
class SessionPlanDraft:
    session_number: int
    session_date: str
    title: str
    title_ar: str
    description: str = ""
    description_ar: str = ""
    status: str = "planned"
    objectives: Tuple[str, ...] = ()
    objectives_ar: Tuple[str, ...] = ()
    materials: Tuple[str, ...] = ()
    materials_ar: Tuple[str, ...] = ()
    activities: Tuple[SessionActivity, ...] = ()
    notes: str = ""
    notes_ar: str = ""


def course_payload(draft: CourseDraft) -> Dict[str, Any]:
    return {
        "name": draft.name,
        "nameAr": draft.name_ar,
        "description": draft.description,
        "descriptionAr": draft.description_ar,
        "price": draft.price,
        "currency": draft.currency,
        "duration": draft.duration,
        "maxStudents": draft.max_students,
        "categoryId": draft.category_id,
        "isActive": draft.is_active,
    }


def _activity_payload(activity: SessionActivity) -> Dict[str, Any]:
    return {
        "name": activity.name,
        "nameAr": activity.name_ar,
        "duration": activity.duration,
        "type": activity.type,
        "description": activity.description,
        "descriptionAr": activity.description_ar,
    }


def session_plan_payload(draft: SessionPlanDraft) -> Dict[str, Any]:
    return {
        "sessionNumber": draft.session_number,
        "sessionDate": draft.session_date,
        "title": draft.title,
        "titleAr": draft.title_ar,
        "description": draft.description,
        "descriptionAr": draft.description_ar,
        "status": draft.status,
        "objectives": list(draft.objectives),
        "objectivesAr": list(draft.objectives_ar),
        "materials": list(draft.materials),
        "materialsAr": list(draft.materials_ar),
        "activities": [_activity_payload(item) for item in draft.activities],
        "notes": draft.notes,
        "notesAr": draft.notes_ar,
    }


@dataclass
class LoadCourses:
    actions: ActionPort

    def __call__(self) -> List[Course]:
        payload = call_action(self.actions, "getCourses")
        return parse_payload("getCourses", parse_many, CourseWire, payload.get("courses"))


@dataclass
class LoadCategories:
    actions: ActionPort

    def __call__(self) -> List[Category]:
        payload = call_action(self.actions, "getAllCategories")
        return parse_payload("getAllCategories", parse_many, CategoryWire, payload.get("categories"))


@dataclass
class CreateCourse:
    actions: ActionPort

    def __call__(self, draft: CourseDraft) -> Course:
        payload = call_action(self.actions, "createCourse", course_payload(draft), default_code="CREATE_FAILED")
        return parse_payload("createCourse", parse_one, CourseWire, payload.get("course"))


@dataclass
class UpdateCourse:
    actions: ActionPort

    def __call__(self, course_id: str, draft: CourseDraft) -> None:
        call_action(
            self.actions,
            "updateCourse",
            {"courseId": course_id, **course_payload(draft)},
            default_code="UPDATE_FAILED",
        )


@dataclass
class SetCourseActive:
    actions: ActionPort

    def __call__(self, course_id: str, is_active: bool) -> None:
        call_action(
            self.actions,
            "updateCourse",
            {"courseId": course_id, "isActive": is_active},
            default_code="UPDATE_FAILED",
        )


@dataclass
class DeleteCourse:
    actions: ActionPort

    def __call__(self, course_id: str) -> None:
        call_action(self.actions, "deleteCourse", {"courseId": course_id}, default_code="DELETE_FAILED")


@dataclass
class LoadSessionPlans:
    actions: ActionPort

    def __call__(self, course_id: str) -> List[SessionPlan]:
        payload = call_action(self.actions, "getSessionPlans", {"courseId": course_id})
        return parse_payload("getSessionPlans", parse_many, SessionPlanWire, payload.get("sessionPlans"))


@dataclass
class CreateSessionPlan:
    actions: ActionPort

    def __call__(self, course_id: str, draft: SessionPlanDraft) -> SessionPlan:
        payload = call_action(
            self.actions,
            "createSessionPlan",
            {"courseId": course_id, **session_plan_payload(draft)},
            default_code="CREATE_FAILED",
        )
        return parse_payload("createSessionPlan", parse_one, SessionPlanWire, payload.get("sessionPlan"))


@dataclass
class UpdateSessionPlan:
    actions: ActionPort

    def __call__(self, session_plan_id: str, draft: SessionPlanDraft) -> None:
        call_action(
            self.actions,
            "updateSessionPlan",
            {"sessionPlanId": session_plan_id, **session_plan_payload(draft)},
            default_code="UPDATE_FAILED",
        )


class PartialCourseCreation(UseCaseError):
    """Course was created but one of its session plans failed.

    The course is left in place; ``course_id`` identifies it so the user can
    finish the sessions from the editor.
    """

    def __init__(self, course_id: str, created_sessions: int, cause: UseCaseError):
        super().__init__(
            "PARTIAL_CREATE",
            f"Course created but session {created_sessions + 1} failed: {cause.message}",
            meta={"course_id": course_id, "created_sessions": created_sessions},
        )
        self.course_id = course_id
        self.created_sessions = created_sessions
        self.cause = cause


@dataclass
class CourseWithSessions:
    course: Course
    sessions: List[SessionPlan] = field(default_factory=list)


@dataclass
class CreateCourseWithSessions:
    """Create a course, then each of its session plans in order.

    There is no rollback: a session failure raises ``PartialCourseCreation``
    with the already created course id.
    """

    create_course: CreateCourse
    create_session_plan: CreateSessionPlan

    def __call__(self, draft: CourseDraft, sessions: Sequence[SessionPlanDraft]) -> CourseWithSessions:
        course = self.create_course(draft)
        result = CourseWithSessions(course=course)
        for session in sessions:
            try:
                result.sessions.append(self.create_session_plan(course.id, session))
            except UseCaseError as exc:
                LOGGER.warning(
                    "Course %s created, session %s failed: %s", course.id, session.session_number, exc.message
                )
                raise PartialCourseCreation(course.id, len(result.sessions), exc) from exc
        return result


@dataclass
class CourseUseCases:
    load: LoadCourses
    load_categories: LoadCategories
    create: CreateCourse
    update: UpdateCourse
    set_active: SetCourseActive
    delete: DeleteCourse
    load_session_plans: LoadSessionPlans
    create_session_plan: CreateSessionPlan
    update_session_plan: UpdateSessionPlan
    create_with_sessions: CreateCourseWithSessions

    @classmethod
    def from_actions(cls, actions: ActionPort) -> "CourseUseCases":
        create = CreateCourse(actions)
        create_plan = CreateSessionPlan(actions)
        return cls(
            load=LoadCourses(actions),
            load_categories=LoadCategories(actions),
            create=create,
            update=UpdateCourse(actions),
            set_active=SetCourseActive(actions),
            delete=DeleteCourse(actions),
            load_session_plans=LoadSessionPlans(actions),
            create_session_plan=create_plan,
            update_session_plan=UpdateSessionPlan(actions),
            create_with_sessions=CreateCourseWithSessions(create, create_plan),
        )


__all__ = [
    "CourseUseCases",
    "CourseDraft",
    "CourseWithSessions",
    "CreateCourse",
    "CreateCourseWithSessions",
    "CreateSessionPlan",
    "DeleteCourse",
    "LoadCategories",
    "LoadCourses",
    "LoadSessionPlans",
    "PartialCourseCreation",
    "SessionPlanDraft",
    "SetCourseActive",
    "UpdateCourse",
    "UpdateSessionPlan",
    "course_payload",
    "session_plan_payload",
]
