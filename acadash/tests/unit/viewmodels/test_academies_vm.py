from __future__ import annotations

import asyncio

from acadash.adapters.actions_mock import InMemoryActions
from acadash.app.shared_store import CURRENT_ACADEMY_ID, SharedStore
from acadash.tests.unit.viewmodels.helpers import GatedActions, RecordingNotifier
from acadash.usecases.academies import AcademyUseCases
from acadash.viewmodels.academies_vm import AcademiesVM


def _vm(actions: InMemoryActions, store: SharedStore = None):
    notifier = RecordingNotifier()
    vm = AcademiesVM(AcademyUseCases.from_actions(actions), notifier=notifier, store=store)
    return vm, notifier


def _seeded() -> InMemoryActions:
    actions = InMemoryActions()
    actions.add_academy("ac-1", "Muscat Academy", "أكاديمية مسقط", slug="muscat")
    actions.add_academy("ac-2", "Sohar Academy", "أكاديمية صحار", isActive=False)
    actions.add_user("user-m", username="manager", role="manager")
    return actions


def test_load_mirrors_server_collection() -> None:
    actions = _seeded()
    vm, notifier = _vm(actions)

    asyncio.run(vm.mount())

    assert [a.id for a in vm.academies] == ["ac-1", "ac-2"]
    assert vm.manager_for("ac-1") is None
    assert notifier.errors == []
    assert not vm.loading.active


def test_two_loads_without_mutation_yield_identical_state() -> None:
    vm, _ = _vm(_seeded())

    async def scenario():
        await vm.load()
        first = (list(vm.academies), dict(vm.managers_by_academy))
        await vm.load()
        return first, (list(vm.academies), dict(vm.managers_by_academy))

    first, second = asyncio.run(scenario())

    assert first == second


def test_create_requires_arabic_name_then_creates_without_slug() -> None:
    actions = _seeded()
    vm, notifier = _vm(actions)

    async def scenario():
        await vm.load()
        vm.open_create()
        vm.create_dialog.set("name", "Nizwa Academy")
        rejected = await vm.submit_create()
        assert rejected is False
        assert actions.calls_to("createAcademy") == []
        assert notifier.errors == ["Name and Arabic name are required"]
        assert vm.create_dialog.is_open

        vm.create_dialog.set("name_ar", "أكاديمية نزوى")
        return await vm.submit_create()

    assert asyncio.run(scenario()) is True

    sent = actions.calls_to("createAcademy")
    assert sent == [{"name": "Nizwa Academy", "nameAr": "أكاديمية نزوى"}]
    assert not vm.create_dialog.is_open
    assert vm.create_dialog.values["name"] == ""
    assert "Nizwa Academy" in [a.name for a in vm.academies]
    assert notifier.successes == ["Academy created successfully"]
    assert [name for name, _ in actions.calls].count("getAllAcademies") == 2


def test_create_rejection_shows_server_error_and_keeps_dialog_open() -> None:
    actions = _seeded()
    actions.reject("createAcademy", "Slug already in use")
    vm, notifier = _vm(actions)
    vm.open_create()
    vm.create_dialog.set("name", "Dup")
    vm.create_dialog.set("name_ar", "مكرر")

    assert asyncio.run(vm.submit_create()) is False

    assert notifier.errors == ["Slug already in use"]
    assert vm.create_dialog.is_open
    assert vm.create_dialog.submit_enabled


def test_transport_failure_shows_generic_message() -> None:
    actions = _seeded()
    actions.fail("createAcademy", ConnectionError("boom"))
    vm, notifier = _vm(actions)
    vm.open_create()
    vm.create_dialog.set("name", "A")
    vm.create_dialog.set("name_ar", "ب")

    assert asyncio.run(vm.submit_create()) is False
    assert notifier.errors == ["Failed to create academy"]


def test_submit_is_disabled_while_request_is_in_flight() -> None:
    actions = GatedActions("createAcademy")
    vm, _ = _vm(actions)
    vm.open_create()
    vm.create_dialog.set("name", "Gated")
    vm.create_dialog.set("name_ar", "مقفل")

    async def scenario():
        task = asyncio.create_task(vm.submit_create())
        while not actions.entered.is_set():
            await asyncio.sleep(0.01)
        assert not vm.create_dialog.submit_enabled
        assert vm.create_dialog.submit_label == "Creating..."
        second = await vm.submit_create()
        actions.release()
        return second, await task

    second, first = asyncio.run(scenario())

    assert second is False
    assert first is True
    assert len(actions.calls_to("createAcademy")) == 1
    assert vm.create_dialog.submit_enabled


def test_cancelled_delete_never_calls_the_action() -> None:
    actions = _seeded()
    vm, _ = _vm(actions)

    vm.request_delete("ac-1")
    assert vm.delete_confirm.is_open
    vm.cancel_delete()

    assert not vm.delete_confirm.is_open
    assert asyncio.run(vm.confirm_delete()) is False
    assert actions.calls_to("deleteAcademy") == []


def test_confirmed_delete_reloads() -> None:
    actions = _seeded()
    vm, notifier = _vm(actions)

    async def scenario():
        await vm.load()
        vm.request_delete("ac-2")
        return await vm.confirm_delete()

    assert asyncio.run(scenario()) is True
    assert [a.id for a in vm.academies] == ["ac-1"]
    assert notifier.successes == ["Academy deleted successfully"]


def test_edit_sends_active_flag_and_omits_blank_image() -> None:
    actions = _seeded()
    vm, _ = _vm(actions)

    async def scenario():
        await vm.load()
        vm.open_edit(vm.academies[1])
        vm.edit_dialog.set("is_active", True)
        return await vm.submit_update()

    assert asyncio.run(scenario()) is True
    body = actions.calls_to("updateAcademy")[0]
    assert body["academyId"] == "ac-2"
    assert body["isActive"] is True
    assert "image" not in body
    assert "slug" not in body


def test_assign_requires_user_and_loads_managers_once() -> None:
    actions = _seeded()
    vm, notifier = _vm(actions)

    async def scenario():
        await vm.load()
        await vm.open_assign("ac-1")
        assert await vm.submit_assign() is False
        vm.assign_dialog.set("user_id", "user-m")
        assert await vm.submit_assign() is True
        await vm.open_assign("ac-2")

    asyncio.run(scenario())

    assert notifier.errors == ["Please select a user"]
    assert len(actions.calls_to("getEligibleAcademyManagers")) == 1
    assert actions.calls_to("assignExistingAcademyManager") == [{"academyId": "ac-1", "userId": "user-m"}]
    assert vm.manager_for("ac-1").user_id == "user-m"


def test_set_current_publishes_to_store() -> None:
    store = SharedStore()
    seen = []
    store.subscribe(CURRENT_ACADEMY_ID, seen.append)
    actions = _seeded()
    vm, _ = _vm(actions, store)

    assert asyncio.run(vm.set_current("ac-1")) is True
    assert seen == ["ac-1"]
    assert actions.calls_to("setCurrentAcademy") == [{"locale": "en", "academyId": "ac-1"}]


def test_filters_combine_status_manager_and_query() -> None:
    vm, _ = _vm(_seeded())
    asyncio.run(vm.load())

    vm.status_filter = "active"
    assert [a.id for a in vm.visible_academies] == ["ac-1"]
    vm.status_filter = "all"
    vm.query = "sohar"
    assert [a.id for a in vm.visible_academies] == ["ac-2"]
    vm.query = ""
    vm.manager_filter = "assigned"
    assert vm.visible_academies == []


def test_results_after_unmount_are_dropped() -> None:
    actions = GatedActions("getAllAcademies")
    actions.add_academy("ac-1", "Muscat", "مسقط")
    vm, notifier = _vm(actions)

    async def scenario():
        task = asyncio.create_task(vm.load())
        while not actions.entered.is_set():
            await asyncio.sleep(0.01)
        vm.unmount()
        actions.release()
        await task

    asyncio.run(scenario())

    assert vm.academies == []
    assert notifier.errors == []
