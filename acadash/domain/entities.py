"""Client-side projections of entities owned by the action layer.

The action API owns every record; these value objects only mirror the fields
the dashboard screens read. Adapters build them from wire payloads, view
models replace them wholesale on reload or patch them with ``replace``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal, Optional, Tuple

NotificationType = Literal["info", "success", "warning", "error"]
NotificationCategory = Literal["system", "appointments", "users", "messages"]
PaymentStatus = Literal["pending", "paid", "rejected"]
SessionStatus = Literal["planned", "in-progress", "completed", "cancelled"]
ActivityType = Literal["warmup", "drill", "game", "cooldown", "other"]


@dataclass(frozen=True)
class UserSummary:
    """Minimal user card shown in pickers and member rows."""

    id: str
    email: str
    username: str
    full_name: Optional[str] = None
    role: str = "player"

    @property
    def display_name(self) -> str:
        return self.full_name or self.username or self.email


@dataclass(frozen=True)
class ManagerSummary:
    """Manager assigned to an academy."""

    user_id: str
    email: str
    username: str
    full_name: Optional[str] = None
    role: str = "manager"


@dataclass(frozen=True)
class Academy:
    """Tenant record; ``name_ar`` is the Arabic display name."""

    id: str
    name: str
    name_ar: str
    slug: str = ""
    image: Optional[str] = None
    is_active: bool = True


@dataclass(frozen=True)
class Program:
    id: str
    name: str
    name_ar: str = ""
    academy_id: Optional[str] = None
    is_active: bool = True


@dataclass(frozen=True)
class ProgramMember:
    """Enrollment of a player in a program."""

    id: str
    program_id: str
    user_id: str
    academy_id: str = ""
    status: str = "active"
    points_total: int = 0
    user: Optional[UserSummary] = None
    level_name: Optional[str] = None


@dataclass(frozen=True)
class AttendanceRecord:
    user_id: str
    present: bool = False
    notes: Optional[str] = None


@dataclass(frozen=True)
class AttendanceSummary:
    """Sessions attended out of sessions marked for one player."""

    attended: int = 0
    marked: int = 0


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    name_ar: str = ""


@dataclass(frozen=True)
class Course:
    id: str
    name: str
    name_ar: str
    description: Optional[str] = None
    description_ar: Optional[str] = None
    price: float = 0.0
    currency: str = "OMR"
    duration: int = 1
    max_students: Optional[int] = None
    category_id: Optional[str] = None
    is_active: bool = True


@dataclass(frozen=True)
class SessionActivity:
    name: str
    name_ar: str
    duration: int = 10
    type: ActivityType = "drill"
    description: str = ""
    description_ar: str = ""


@dataclass(frozen=True)
class SessionPlan:
    """Plan for one numbered session of a course."""

    id: str
    course_id: str
    session_number: int
    session_date: str
    title: str
    title_ar: str
    description: str = ""
    description_ar: str = ""
    status: SessionStatus = "planned"
    objectives: Tuple[str, ...] = ()
    objectives_ar: Tuple[str, ...] = ()
    materials: Tuple[str, ...] = ()
    materials_ar: Tuple[str, ...] = ()
    activities: Tuple[SessionActivity, ...] = ()
    notes: str = ""
    notes_ar: str = ""


@dataclass(frozen=True)
class Notification:
    id: str
    title: str
    message: str
    timestamp: datetime
    type: NotificationType = "info"
    category: NotificationCategory = "system"
    read: bool = False
    link: Optional[str] = None


@dataclass(frozen=True)
class Message:
    id: str
    sender_id: str
    content: str
    created_at: datetime
    recipient_id: Optional[str] = None
    group_id: Optional[str] = None
    read_by: Tuple[str, ...] = ()

    def is_unread_for(self, user_id: str) -> bool:
        """Direct message addressed to ``user_id`` that they have not read."""
        return self.recipient_id == user_id and user_id not in self.read_by


@dataclass(frozen=True)
class MessageGroup:
    id: str
    name: str
    members: Tuple[str, ...] = ()
    created_by: str = ""


@dataclass(frozen=True)
class Conversation:
    """Direct-message thread summary with one other user."""

    user_id: str
    name: str
    last_message: Optional[str] = None
    unread_count: int = 0


@dataclass(frozen=True)
class Enrollment:
    """Course enrollment with its payment review state."""

    id: str
    course_id: str
    course_name: str
    student_name: str
    course_name_ar: str = ""
    payment_status: Optional[PaymentStatus] = None
    payment_date: Optional[str] = None
    payment_proof: Optional[str] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class UnreadCounts:
    notifications: int = 0
    messages: int = 0


@dataclass(frozen=True)
class ConversationRef:
    """Selected conversation target: a user or a group."""

    kind: Literal["user", "group"]
    id: str
    name: str = ""
