"""Domain package exports for client-side projections and ports."""

from .entities import (
    Academy,
    AttendanceRecord,
    AttendanceSummary,
    Category,
    Conversation,
    ConversationRef,
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
from .ports import ActionPort, ActionRejected, Notifier, UseCaseError, ValidationError

__all__ = [
    "Academy",
    "ActionPort",
    "ActionRejected",
    "AttendanceRecord",
    "AttendanceSummary",
    "Category",
    "Conversation",
    "ConversationRef",
    "Course",
    "Enrollment",
    "ManagerSummary",
    "Message",
    "MessageGroup",
    "Notification",
    "Notifier",
    "Program",
    "ProgramMember",
    "SessionActivity",
    "SessionPlan",
    "UnreadCounts",
    "UseCaseError",
    "UserSummary",
    "ValidationError",
]
