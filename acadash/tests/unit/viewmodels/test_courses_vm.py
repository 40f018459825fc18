from __future__ import annotations

import asyncio

from acadash.adapters.actions_mock import InMemoryActions
from acadash.tests.unit.viewmodels.helpers import GatedActions, RecordingNotifier
from acadash.usecases.courses import CourseUseCases, SessionPlanDraft
from acadash.viewmodels.courses_vm import CourseFormVM, CoursesVM


def _seeded() -> InMemoryActions:
    actions = InMemoryActions()
    actions.add_category("cat-1", "Football")
    actions.add_course("course-1", "Beginner Football", "كرة القدم للمبتدئين", categoryId="cat-1")
    actions.add_course("course-2", "Swimming", "سباحة", isActive=False)
    return actions


def _list_vm(actions: InMemoryActions):
    notifier = RecordingNotifier()
    return CoursesVM(CourseUseCases.from_actions(actions), notifier=notifier), notifier


def _form_vm(actions: InMemoryActions, **kwargs):
    notifier = RecordingNotifier()
    return CourseFormVM(CourseUseCases.from_actions(actions), notifier=notifier, **kwargs), notifier


def _session(number: int) -> SessionPlanDraft:
    return SessionPlanDraft(
        session_number=number, session_date=f"2026-04-0{number}", title=f"Week {number}", title_ar=f"الأسبوع {number}"
    )


def test_list_loads_courses_with_categories() -> None:
    vm, _ = _list_vm(_seeded())

    asyncio.run(vm.mount())

    assert [c.id for c in vm.courses] == ["course-1", "course-2"]
    assert vm.category_name("cat-1") == "Football"
    vm.search = "swim"
    assert [c.id for c in vm.visible_courses] == ["course-2"]


def test_toggle_active_rolls_back_on_rejection() -> None:
    actions = _seeded()
    vm, notifier = _list_vm(actions)
    asyncio.run(vm.load())
    actions.reject("updateCourse", "Course has active enrollments")

    assert asyncio.run(vm.toggle_active("course-1")) is False

    assert vm.courses[0].is_active is True
    assert notifier.errors == ["Course has active enrollments"]
    assert actions.calls_to("updateCourse") == [{"courseId": "course-1", "isActive": False}]


def test_toggle_active_keeps_new_state_on_success() -> None:
    actions = _seeded()
    vm, notifier = _list_vm(actions)
    asyncio.run(vm.load())

    assert asyncio.run(vm.toggle_active("course-2")) is True
    assert vm.courses[1].is_active is True
    assert actions.courses["course-2"]["isActive"] is True
    assert notifier.successes == ["Saved"]


def test_delete_needs_confirmation_and_restores_on_failure() -> None:
    actions = _seeded()
    vm, notifier = _list_vm(actions)
    asyncio.run(vm.load())

    vm.request_delete("course-1")
    vm.cancel_delete()
    assert asyncio.run(vm.confirm_delete()) is False
    assert actions.calls_to("deleteCourse") == []

    actions.fail("deleteCourse", ConnectionError("down"))
    vm.request_delete("course-1")
    assert asyncio.run(vm.confirm_delete()) is False
    assert [c.id for c in vm.courses] == ["course-1", "course-2"]
    assert notifier.errors == ["Failed to delete course"]
    assert vm.delete.is_open


def test_form_validation_blocks_the_call() -> None:
    actions = _seeded()
    vm, notifier = _form_vm(actions)
    vm.form.set("name", "Tennis")
    vm.form.set("name_ar", "تنس")
    vm.form.set("price", -1)

    assert asyncio.run(vm.submit()) is False
    vm.form.set("price", "12.5")
    vm.form.set("duration", 0)
    assert asyncio.run(vm.submit()) is False

    assert notifier.errors == ["Price must be zero or more", "Duration must be at least 1"]
    assert actions.calls_to("createCourse") == []


def test_create_omits_empty_optionals_and_zero_max_students() -> None:
    actions = _seeded()
    vm, notifier = _form_vm(actions)
    vm.form.set("name", "Tennis")
    vm.form.set("name_ar", "تنس")
    vm.form.set("price", "12.5")
    vm.form.set("duration", "8")

    assert asyncio.run(vm.submit()) is True

    assert actions.calls_to("createCourse") == [
        {"name": "Tennis", "nameAr": "تنس", "price": 12.5, "currency": "OMR", "duration": 8}
    ]
    assert vm.saved_course.name == "Tennis"
    assert notifier.successes == ["Course created"]


def test_bulk_create_sends_sessions_in_order() -> None:
    actions = _seeded()
    vm, _ = _form_vm(actions)
    vm.form.set("name", "Tennis")
    vm.form.set("name_ar", "تنس")
    vm.form.set("max_students", 12)
    vm.queue_session(_session(1))
    vm.queue_session(_session(2))

    assert asyncio.run(vm.submit()) is True

    course_id = vm.saved_course.id
    plans = actions.calls_to("createSessionPlan")
    assert [p["sessionNumber"] for p in plans] == [1, 2]
    assert all(p["courseId"] == course_id for p in plans)
    assert actions.calls_to("createCourse")[0]["maxStudents"] == 12
    assert vm.sessions == []


def test_bulk_create_reports_partial_course_without_rollback() -> None:
    actions = _seeded()
    actions.reject("createSessionPlan", "Session date is in the past")
    vm, notifier = _form_vm(actions)
    vm.form.set("name", "Tennis")
    vm.form.set("name_ar", "تنس")
    vm.queue_session(_session(1))

    assert asyncio.run(vm.submit()) is False

    assert vm.partial_course_id is not None
    assert vm.partial_course_id in actions.courses
    assert actions.calls_to("deleteCourse") == []
    assert len(notifier.errors) == 1
    assert vm.partial_course_id in notifier.errors[0]
    assert "Session date is in the past" in notifier.errors[0]


def test_edit_sends_active_flag() -> None:
    actions = _seeded()
    list_vm, _ = _list_vm(actions)
    asyncio.run(list_vm.load())
    vm, notifier = _form_vm(actions, course=list_vm.courses[0])
    vm.form.set("is_active", False)

    assert asyncio.run(vm.submit()) is True

    body = actions.calls_to("updateCourse")[0]
    assert body["courseId"] == "course-1"
    assert body["isActive"] is False
    assert body["categoryId"] == "cat-1"
    assert notifier.successes == ["Course updated"]


def test_failed_delete_restores_only_the_deleted_course() -> None:
    actions = GatedActions("deleteCourse")
    actions.add_course("course-1", "Beginner Football", "كرة القدم للمبتدئين")
    actions.add_course("course-2", "Swimming", "سباحة", isActive=False)
    actions.reject("deleteCourse", "Course has active enrollments")
    vm, notifier = _list_vm(actions)

    async def scenario():
        await vm.load()
        vm.request_delete("course-1")
        deleting = asyncio.create_task(vm.confirm_delete())
        while not actions.entered.is_set():
            await asyncio.sleep(0.01)
        assert await vm.toggle_active("course-2") is True
        actions.release()
        return await deleting

    assert asyncio.run(scenario()) is False

    assert [(c.id, c.is_active) for c in vm.courses] == [("course-1", True), ("course-2", True)]
    assert notifier.errors == ["Course has active enrollments"]


def test_typed_sessions_are_numbered_in_queue_order() -> None:
    vm, notifier = _form_vm(_seeded())

    assert vm.add_queued_session() is False
    for day, title in (("2026-04-01", "Intro"), ("2026-04-08", "Passing"), ("2026-04-15", "Shooting")):
        vm.session_form.set("session_date", day)
        vm.session_form.set("title", title)
        vm.session_form.set("title_ar", f"{title} ar")
        assert vm.add_queued_session() is True
    vm.remove_session(0)

    assert [(s.session_number, s.title) for s in vm.sessions] == [(1, "Passing"), (2, "Shooting")]
    assert vm.session_form.get("title") == ""
    assert notifier.errors == ["Title is required"]


def test_edit_form_lists_existing_session_plans() -> None:
    actions = _seeded()
    actions.session_plans["plan-2"] = {"id": "plan-2", "courseId": "course-1", "sessionNumber": 2, "sessionDate": "2026-04-08"}
    actions.session_plans["plan-1"] = {"id": "plan-1", "courseId": "course-1", "sessionNumber": 1, "sessionDate": "2026-04-01"}
    list_vm, _ = _list_vm(actions)
    asyncio.run(list_vm.load())
    vm, _ = _form_vm(actions, course=list_vm.courses[0])

    asyncio.run(vm.mount())

    assert [plan.id for plan in vm.session_plans] == ["plan-1", "plan-2"]
    assert vm.next_session_number == 3
    assert actions.calls_to("getSessionPlans") == [{"courseId": "course-1"}]
