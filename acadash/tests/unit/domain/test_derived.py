from __future__ import annotations

from datetime import datetime, timedelta, timezone

from acadash.domain.derived import (
    attendance_stats,
    available_players,
    bucket_enrollments,
    filter_academies,
    filter_notifications,
    notification_counts,
)
from acadash.domain.entities import (
    Academy,
    AttendanceRecord,
    Enrollment,
    ManagerSummary,
    Notification,
    ProgramMember,
    UserSummary,
)

NOW = datetime(2026, 5, 10, 12, 0, tzinfo=timezone.utc)


def _academies():
    return [
        Academy(id="ac-1", name="Muscat Academy", name_ar="أكاديمية مسقط", slug="muscat"),
        Academy(id="ac-2", name="Sohar Academy", name_ar="أكاديمية صحار", slug="sohar", is_active=False),
        Academy(id="ac-3", name="Nizwa Club", name_ar="نادي نزوى", slug="nizwa"),
    ]


MANAGERS = {"ac-1": ManagerSummary(user_id="u1", email="m@example.com", username="m"), "ac-2": None}


def test_academy_filters_combine() -> None:
    academies = _academies()

    assert [a.id for a in filter_academies(academies, MANAGERS, status="active")] == ["ac-1", "ac-3"]
    assert [a.id for a in filter_academies(academies, MANAGERS, manager="unassigned")] == ["ac-2", "ac-3"]
    assert [a.id for a in filter_academies(academies, MANAGERS, query=" ACADEMY ", status="inactive")] == ["ac-2"]
    assert [a.id for a in filter_academies(academies, MANAGERS, query="نزوى")] == ["ac-3"]


def _notification(nid: str, *, read: bool = False, hours_ago: int = 1, category: str = "system") -> Notification:
    return Notification(
        id=nid,
        title=nid,
        message="",
        timestamp=NOW - timedelta(hours=hours_ago),
        category=category,  # type: ignore[arg-type]
        read=read,
    )


def test_notification_counts_and_filters() -> None:
    items = [
        _notification("n1"),
        _notification("n2", read=True, hours_ago=30, category="messages"),
        _notification("n3", category="messages"),
    ]

    counts = notification_counts(items, now=NOW)

    assert (counts.unread, counts.read, counts.today) == (2, 1, 2)
    assert [n.id for n in filter_notifications(items, category="messages", read_filter="unread")] == ["n3"]
    assert [n.id for n in filter_notifications(items, read_filter="read")] == ["n2"]


def test_naive_timestamps_count_as_utc() -> None:
    naive = Notification(id="n", title="", message="", timestamp=datetime(2026, 5, 10, 2, 0))

    assert notification_counts([naive], now=NOW).today == 1


def test_available_players_exclude_members() -> None:
    players = [
        UserSummary(id="p1", email="a@example.com", username="ahmed"),
        UserSummary(id="p2", email="f@example.com", username="fatma", full_name="Fatma Al Harthi"),
    ]
    members = [ProgramMember(id="m1", program_id="prog-1", user_id="p1")]

    assert [p.id for p in available_players(players, members)] == ["p2"]
    assert available_players(players, members, query="ahmed") == []


def test_attendance_stats_treat_missing_as_absent() -> None:
    members = [ProgramMember(id=f"m{i}", program_id="prog-1", user_id=f"p{i}") for i in range(3)]
    sheet = {"p0": AttendanceRecord("p0", present=True), "p1": AttendanceRecord("p1", present=False)}

    stats = attendance_stats(members, sheet)

    assert (stats.total, stats.present, stats.absent) == (3, 1, 2)


def test_enrollments_without_status_are_unpaid() -> None:
    items = [
        Enrollment(id="e1", course_id="c", course_name="C", student_name="S"),
        Enrollment(id="e2", course_id="c", course_name="C", student_name="S", payment_status="paid"),
    ]

    buckets = bucket_enrollments(items)

    assert [e.id for e in buckets.unpaid] == ["e1"]
    assert [e.id for e in buckets.paid] == ["e2"]
    assert buckets.pending == [] and buckets.rejected == []
