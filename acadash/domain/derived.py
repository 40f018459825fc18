"""Pure derived views over collection state.

Every function here is recomputed from current view-model state and never
mutates its inputs. View models call them from read-only properties.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Literal, Mapping, Optional, Sequence

from .entities import (
    Academy,
    AttendanceRecord,
    Conversation,
    Enrollment,
    ManagerSummary,
    Notification,
    ProgramMember,
    UserSummary,
)

StatusFilter = Literal["all", "active", "inactive"]
ManagerFilter = Literal["all", "assigned", "unassigned"]
ReadFilter = Literal["all", "unread", "read"]
CategoryTab = Literal["all", "system", "appointments", "users", "messages"]


@dataclass(frozen=True)
class NotificationCounts:
    unread: int
    read: int
    today: int


@dataclass(frozen=True)
class AttendanceStats:
    total: int
    present: int
    absent: int


@dataclass(frozen=True)
class EnrollmentBuckets:
    pending: List[Enrollment]
    paid: List[Enrollment]
    unpaid: List[Enrollment]
    rejected: List[Enrollment]


def _contains(haystack: Iterable[Optional[str]], needle: str) -> bool:
    text = " ".join(part for part in haystack if part).lower()
    return needle in text


def filter_academies(
    academies: Sequence[Academy],
    managers_by_academy: Mapping[str, Optional[ManagerSummary]],
    *,
    query: str = "",
    status: StatusFilter = "all",
    manager: ManagerFilter = "all",
) -> List[Academy]:
    """Apply status, manager assignment, and free-text filters in order."""
    needle = query.strip().lower()
    visible: List[Academy] = []
    for academy in academies:
        if status == "active" and not academy.is_active:
            continue
        if status == "inactive" and academy.is_active:
            continue
        has_manager = bool(managers_by_academy.get(academy.id))
        if manager == "assigned" and not has_manager:
            continue
        if manager == "unassigned" and has_manager:
            continue
        if needle and not _contains((academy.name, academy.name_ar, academy.slug), needle):
            continue
        visible.append(academy)
    return visible


def filter_notifications(
    notifications: Sequence[Notification],
    *,
    category: CategoryTab = "all",
    read_filter: ReadFilter = "all",
) -> List[Notification]:
    result: List[Notification] = []
    for item in notifications:
        if category != "all" and item.category != category:
            continue
        if read_filter == "unread" and item.read:
            continue
        if read_filter == "read" and not item.read:
            continue
        result.append(item)
    return result


def notification_counts(
    notifications: Sequence[Notification], *, now: Optional[datetime] = None
) -> NotificationCounts:
    """Unread/read totals plus how many arrived within the last 24 hours."""
    reference = now or datetime.now(timezone.utc)
    unread = sum(1 for item in notifications if not item.read)
    today = 0
    for item in notifications:
        stamp = item.timestamp
        if stamp.tzinfo is None:
            stamp = stamp.replace(tzinfo=timezone.utc)
        if reference - stamp < timedelta(days=1):
            today += 1
    return NotificationCounts(unread=unread, read=len(notifications) - unread, today=today)


def available_players(
    players: Sequence[UserSummary],
    members: Sequence[ProgramMember],
    *,
    query: str = "",
) -> List[UserSummary]:
    """Players that are not yet members, narrowed by the search text."""
    enrolled = {member.user_id for member in members}
    needle = query.strip().lower()
    result: List[UserSummary] = []
    for player in players:
        if player.id in enrolled:
            continue
        if needle and not _contains((player.full_name, player.username, player.email), needle):
            continue
        result.append(player)
    return result


def attendance_stats(
    members: Sequence[ProgramMember], attendance: Mapping[str, AttendanceRecord]
) -> AttendanceStats:
    total = len(members)
    present = sum(
        1 for member in members if attendance.get(member.user_id, AttendanceRecord(member.user_id)).present
    )
    return AttendanceStats(total=total, present=present, absent=max(0, total - present))


def filter_enrollments(enrollments: Sequence[Enrollment], query: str = "") -> List[Enrollment]:
    needle = query.strip().lower()
    if not needle:
        return list(enrollments)
    return [
        item
        for item in enrollments
        if _contains((item.student_name, item.course_name, item.course_name_ar), needle)
    ]


def bucket_enrollments(enrollments: Sequence[Enrollment]) -> EnrollmentBuckets:
    buckets: Dict[str, List[Enrollment]] = {"pending": [], "paid": [], "unpaid": [], "rejected": []}
    for item in enrollments:
        key = item.payment_status or "unpaid"
        buckets.setdefault(key, []).append(item)
    return EnrollmentBuckets(
        pending=buckets["pending"],
        paid=buckets["paid"],
        unpaid=buckets["unpaid"],
        rejected=buckets["rejected"],
    )


def filter_conversations(conversations: Sequence[Conversation], query: str = "") -> List[Conversation]:
    needle = query.strip().lower()
    if not needle:
        return list(conversations)
    return [item for item in conversations if _contains((item.name, item.last_message), needle)]


__all__ = [
    "AttendanceStats",
    "EnrollmentBuckets",
    "NotificationCounts",
    "attendance_stats",
    "available_players",
    "bucket_enrollments",
    "filter_academies",
    "filter_conversations",
    "filter_enrollments",
    "filter_notifications",
    "notification_counts",
]
