from __future__ import annotations

import asyncio
from datetime import datetime, timezone

from acadash.adapters.actions_mock import InMemoryActions
from acadash.tests.unit.viewmodels.helpers import RecordingNotifier
from acadash.usecases.payments import PaymentUseCases
from acadash.viewmodels.payments_vm import PaymentsVM

PAID_AT = datetime(2026, 6, 1, 9, 30, tzinfo=timezone.utc)


def _seeded() -> InMemoryActions:
    actions = InMemoryActions(current_user_id="user-p1")
    actions.add_user("user-p1", username="ahmed", full_name="Ahmed Al Balushi")
    actions.add_user("user-p2", username="fatma", full_name="Fatma Al Harthi")
    actions.add_course("course-1", "Beginner Football", "كرة القدم للمبتدئين")
    actions.add_course("course-2", "Swimming", "سباحة")
    actions.add_enrollment("enr-1", "course-1", "user-p1", status="pending")
    actions.add_enrollment("enr-2", "course-2", "user-p2")
    actions.add_enrollment("enr-3", "course-2", "user-p1", status="rejected")
    return actions


def _vm(actions: InMemoryActions, *, is_admin: bool = True):
    notifier = RecordingNotifier()
    vm = PaymentsVM(
        PaymentUseCases.from_actions(actions), notifier=notifier, is_admin=is_admin, clock=lambda: PAID_AT
    )
    return vm, notifier


def test_admin_sees_all_enrollments_in_buckets() -> None:
    actions = _seeded()
    vm, _ = _vm(actions)

    asyncio.run(vm.mount())

    buckets = vm.buckets
    assert [e.id for e in buckets.pending] == ["enr-1"]
    assert [e.id for e in buckets.unpaid] == ["enr-2"]
    assert [e.id for e in buckets.rejected] == ["enr-3"]
    assert buckets.paid == []
    assert vm.enrollments[0].student_name == "Ahmed Al Balushi"


def test_non_admin_loads_own_enrollments() -> None:
    actions = _seeded()
    vm, _ = _vm(actions, is_admin=False)

    asyncio.run(vm.load())

    assert actions.calls_to("getAllEnrollments") == []
    assert [e.id for e in vm.enrollments] == ["enr-1", "enr-3"]


def test_search_matches_student_and_course() -> None:
    vm, _ = _vm(_seeded())
    asyncio.run(vm.load())

    vm.search = "fatma"
    assert [e.id for e in vm.visible] == ["enr-2"]
    vm.search = "سباحة"
    assert [e.id for e in vm.visible] == ["enr-2", "enr-3"]


def test_marking_paid_patches_row_without_reload() -> None:
    actions = _seeded()
    vm, notifier = _vm(actions)

    async def scenario():
        await vm.load()
        vm.open_status(vm.enrollments[0])
        vm.status_dialog.set("status", "paid")
        vm.status_dialog.set("notes", "Cash at front desk")
        return await vm.submit_status()

    assert asyncio.run(scenario()) is True

    row = vm.enrollments[0]
    assert row.payment_status == "paid"
    assert row.payment_date == PAID_AT.isoformat()
    assert row.notes == "Cash at front desk"
    assert len(actions.calls_to("getAllEnrollments")) == 1
    assert actions.calls_to("updatePaymentStatus") == [
        {"enrollmentId": "enr-1", "status": "paid", "notes": "Cash at front desk"}
    ]
    assert notifier.successes == ['Payment status changed to "Paid"']
    assert not vm.status_dialog.is_open


def test_rejected_update_leaves_row_and_dialog() -> None:
    actions = _seeded()
    actions.reject("updatePaymentStatus", "Proof of payment missing")
    vm, notifier = _vm(actions)

    async def scenario():
        await vm.load()
        vm.open_status(vm.enrollments[1])
        vm.status_dialog.set("status", "paid")
        return await vm.submit_status()

    assert asyncio.run(scenario()) is False
    assert vm.enrollments[1].payment_status is None
    assert notifier.errors == ["Proof of payment missing"]
    assert vm.status_dialog.is_open


def test_unknown_status_is_rejected_locally() -> None:
    actions = _seeded()
    vm, notifier = _vm(actions)

    async def scenario():
        await vm.load()
        vm.open_status(vm.enrollments[0])
        vm.status_dialog.set("status", "refunded")
        return await vm.submit_status()

    assert asyncio.run(scenario()) is False
    assert actions.calls_to("updatePaymentStatus") == []
    assert notifier.errors == ["Please select a payment status"]
