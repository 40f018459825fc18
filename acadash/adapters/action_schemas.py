"""Pydantic wire schemas for action payloads.

Actions speak camelCase JSON. Each schema validates one payload shape and
converts it into the matching frozen domain projection, so nothing above the
adapter layer sees raw dictionaries.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from acadash.domain.entities import (
    Academy,
    AttendanceRecord,
    AttendanceSummary,
    Category,
    Conversation,
    Course,
    Enrollment,
    ManagerSummary,
    Message,
    MessageGroup,
    Notification,
    Program,
    ProgramMember,
    SessionActivity,
    SessionPlan,
    UnreadCounts,
    UserSummary,
)


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ActionEnvelope(WireModel):
    """Discriminated result every action returns."""

    model_config = ConfigDict(extra="allow")

    success: bool
    error: Optional[str] = None

    def payload(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})


class UserWire(WireModel):
    id: str
    email: str = ""
    username: str = ""
    full_name: Optional[str] = None
    role: str = "player"

    def to_domain(self) -> UserSummary:
        return UserSummary(
            id=self.id,
            email=self.email,
            username=self.username,
            full_name=self.full_name,
            role=self.role,
        )


class ManagerWire(WireModel):
    user_id: str
    email: str = ""
    username: str = ""
    full_name: Optional[str] = None
    role: str = "manager"

    def to_domain(self) -> ManagerSummary:
        return ManagerSummary(
            user_id=self.user_id,
            email=self.email,
            username=self.username,
            full_name=self.full_name,
            role=self.role,
        )


class AcademyWire(WireModel):
    id: str
    name: str
    name_ar: str = ""
    slug: str = ""
    image: Optional[str] = None
    is_active: bool = True

    def to_domain(self) -> Academy:
        return Academy(
            id=self.id,
            name=self.name,
            name_ar=self.name_ar,
            slug=self.slug,
            image=self.image or None,
            is_active=self.is_active,
        )


class ProgramWire(WireModel):
    id: str
    name: str
    name_ar: str = ""
    academy_id: Optional[str] = None
    is_active: bool = True

    def to_domain(self) -> Program:
        return Program(
            id=self.id,
            name=self.name,
            name_ar=self.name_ar,
            academy_id=self.academy_id,
            is_active=self.is_active,
        )


class LevelWire(WireModel):
    id: str = ""
    name: str = ""


class ProgramMemberWire(WireModel):
    id: str
    program_id: str
    user_id: str
    academy_id: str = ""
    status: str = "active"
    points_total: int = 0
    user: Optional[UserWire] = None
    current_level: Optional[LevelWire] = None

    def to_domain(self) -> ProgramMember:
        return ProgramMember(
            id=self.id,
            program_id=self.program_id,
            user_id=self.user_id,
            academy_id=self.academy_id,
            status=self.status,
            points_total=self.points_total,
            user=self.user.to_domain() if self.user else None,
            level_name=self.current_level.name if self.current_level else None,
        )


class AttendanceRecordWire(WireModel):
    user_id: str
    present: bool = False
    notes: Optional[str] = None

    def to_domain(self) -> AttendanceRecord:
        return AttendanceRecord(user_id=self.user_id, present=self.present, notes=self.notes)


class AttendanceSummaryWire(WireModel):
    attended: int = 0
    marked: int = 0

    def to_domain(self) -> AttendanceSummary:
        return AttendanceSummary(attended=self.attended, marked=self.marked)


class CategoryWire(WireModel):
    id: str
    name: str
    name_ar: str = ""

    def to_domain(self) -> Category:
        return Category(id=self.id, name=self.name, name_ar=self.name_ar)


class CourseWire(WireModel):
    id: str
    name: str
    name_ar: str = ""
    description: Optional[str] = None
    description_ar: Optional[str] = None
    price: float = 0.0
    currency: str = "OMR"
    duration: int = 1
    max_students: Optional[int] = None
    category_id: Optional[str] = None
    is_active: bool = True

    def to_domain(self) -> Course:
        return Course(**self.model_dump())


class SessionActivityWire(WireModel):
    name: str = ""
    name_ar: str = ""
    duration: int = 10
    type: str = "drill"
    description: str = ""
    description_ar: str = ""

    def to_domain(self) -> SessionActivity:
        return SessionActivity(**self.model_dump())


class SessionPlanWire(WireModel):
    id: str
    course_id: str
    session_number: int
    session_date: str
    title: str = ""
    title_ar: str = ""
    description: str = ""
    description_ar: str = ""
    status: str = "planned"
    objectives: List[str] = Field(default_factory=list)
    objectives_ar: List[str] = Field(default_factory=list)
    materials: List[str] = Field(default_factory=list)
    materials_ar: List[str] = Field(default_factory=list)
    activities: List[SessionActivityWire] = Field(default_factory=list)
    notes: str = ""
    notes_ar: str = ""

    def to_domain(self) -> SessionPlan:
        return SessionPlan(
            id=self.id,
            course_id=self.course_id,
            session_number=self.session_number,
            session_date=self.session_date,
            title=self.title,
            title_ar=self.title_ar,
            description=self.description,
            description_ar=self.description_ar,
            status=self.status,  # type: ignore[arg-type]
            objectives=tuple(self.objectives),
            objectives_ar=tuple(self.objectives_ar),
            materials=tuple(self.materials),
            materials_ar=tuple(self.materials_ar),
            activities=tuple(item.to_domain() for item in self.activities),
            notes=self.notes,
            notes_ar=self.notes_ar,
        )


class NotificationWire(WireModel):
    id: str
    title: str = ""
    message: str = ""
    timestamp: datetime
    type: str = "info"
    category: str = "system"
    read: bool = False
    link: Optional[str] = None

    def to_domain(self) -> Notification:
        return Notification(
            id=self.id,
            title=self.title,
            message=self.message,
            timestamp=self.timestamp,
            type=self.type,  # type: ignore[arg-type]
            category=self.category,  # type: ignore[arg-type]
            read=self.read,
            link=self.link,
        )


class MessageWire(WireModel):
    id: str
    sender_id: str
    content: str
    created_at: datetime
    recipient_id: Optional[str] = None
    group_id: Optional[str] = None
    read_by: List[str] = Field(default_factory=list)

    def to_domain(self) -> Message:
        return Message(
            id=self.id,
            sender_id=self.sender_id,
            content=self.content,
            created_at=self.created_at,
            recipient_id=self.recipient_id,
            group_id=self.group_id,
            read_by=tuple(self.read_by),
        )


class MessageGroupWire(WireModel):
    id: str
    name: str
    members: List[str] = Field(default_factory=list)
    created_by: str = ""

    def to_domain(self) -> MessageGroup:
        return MessageGroup(
            id=self.id, name=self.name, members=tuple(self.members), created_by=self.created_by
        )


class ConversationWire(WireModel):
    user_id: str
    name: str = ""
    last_message: Optional[str] = None
    unread_count: int = 0

    def to_domain(self) -> Conversation:
        return Conversation(
            user_id=self.user_id,
            name=self.name or self.user_id,
            last_message=self.last_message,
            unread_count=self.unread_count,
        )


class CourseRefWire(WireModel):
    name: str = ""
    name_ar: str = ""


class EnrollmentWire(WireModel):
    id: str
    course_id: str
    course: Optional[CourseRefWire] = None
    student: Optional[UserWire] = None
    payment_status: Optional[str] = None
    payment_date: Optional[str] = None
    payment_proof: Optional[str] = None
    notes: Optional[str] = None

    def to_domain(self) -> Enrollment:
        course = self.course or CourseRefWire()
        return Enrollment(
            id=self.id,
            course_id=self.course_id,
            course_name=course.name,
            course_name_ar=course.name_ar,
            student_name=self.student.to_domain().display_name if self.student else "",
            payment_status=self.payment_status or None,  # type: ignore[arg-type]
            payment_date=self.payment_date,
            payment_proof=self.payment_proof,
            notes=self.notes,
        )


class UnreadCountsWire(WireModel):
    notifications: int = 0
    messages: int = 0

    def to_domain(self) -> UnreadCounts:
        return UnreadCounts(notifications=self.notifications, messages=self.messages)


WireT = TypeVar("WireT", bound=WireModel)


def parse_envelope(raw: Any) -> ActionEnvelope:
    """Validate the outer ``{success, error?, ...}`` shape."""
    return ActionEnvelope.model_validate(raw)


def parse_one(schema: Type[WireT], raw: Any) -> Any:
    return schema.model_validate(raw).to_domain()  # type: ignore[attr-defined]


def parse_many(schema: Type[WireT], items: Optional[Iterable[Any]]) -> List[Any]:
    """Validate a list of records; anything other than a list is rejected."""
    models = TypeAdapter(List[schema]).validate_python(items or [])  # type: ignore[valid-type]
    return [model.to_domain() for model in models]


def parse_keyed(schema: Type[WireT], raw: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Validate an object of records keyed by id, such as ``byUserId``."""
    models = TypeAdapter(Dict[str, schema]).validate_python(raw or {})  # type: ignore[valid-type]
    return {key: model.to_domain() for key, model in models.items()}


__all__ = [
    "AcademyWire",
    "ActionEnvelope",
    "AttendanceRecordWire",
    "AttendanceSummaryWire",
    "CategoryWire",
    "ConversationWire",
    "CourseWire",
    "EnrollmentWire",
    "ManagerWire",
    "MessageGroupWire",
    "MessageWire",
    "NotificationWire",
    "ProgramMemberWire",
    "ProgramWire",
    "SessionPlanWire",
    "UnreadCountsWire",
    "UserWire",
    "parse_envelope",
    "parse_keyed",
    "parse_many",
    "parse_one",
]
