from __future__ import annotations

import asyncio

from acadash.adapters.actions_mock import InMemoryActions
from acadash.app.shared_store import CURRENT_ACADEMY_ID, SharedStore
from acadash.tests.unit.viewmodels.helpers import RecordingNotifier
from acadash.usecases.programs import ProgramUseCases
from acadash.viewmodels.program_members_vm import ProgramMembersVM


def _seeded() -> InMemoryActions:
    actions = InMemoryActions()
    actions.add_user("user-p1", username="ahmed", full_name="Ahmed Al Balushi")
    actions.add_user("user-p2", username="fatma", full_name="Fatma Al Harthi")
    actions.add_user("user-p3", username="salim", full_name="Salim Al Hinai")
    actions.add_user("user-coach", username="coach", role="coach")
    actions.add_program("prog-1", "U12 Football", academy_id="ac-1")
    actions.add_program("prog-2", "U14 Football", academy_id="ac-1")
    actions.add_member("prog-1", "user-p1", points_total=40)
    return actions


def _vm(actions: InMemoryActions):
    notifier = RecordingNotifier()
    return ProgramMembersVM(ProgramUseCases.from_actions(actions), notifier=notifier), notifier


def test_mount_selects_first_program_and_loads_its_members() -> None:
    actions = _seeded()
    vm, _ = _vm(actions)

    asyncio.run(vm.mount())

    assert vm.selected_program_id == "prog-1"
    assert [m.user_id for m in vm.members] == ["user-p1"]
    assert [p.id for p in vm.available_players] == ["user-p2", "user-p3"]
    assert actions.calls_to("listProgramMembers") == [{"programId": "prog-1", "locale": "en"}]


def test_available_players_follow_search() -> None:
    vm, _ = _vm(_seeded())
    asyncio.run(vm.load())

    vm.search = "salim"
    assert [p.id for p in vm.available_players] == ["user-p3"]


def test_add_player_reloads_members() -> None:
    actions = _seeded()
    vm, notifier = _vm(actions)

    async def scenario():
        await vm.load()
        return await vm.add_player("user-p2")

    assert asyncio.run(scenario()) is True
    assert [m.user_id for m in vm.members] == ["user-p1", "user-p2"]
    assert notifier.successes == ["Added"]
    assert not vm.adding.active


def test_duplicate_add_shows_server_message() -> None:
    actions = _seeded()
    vm, notifier = _vm(actions)

    async def scenario():
        await vm.load()
        return await vm.add_player("user-p1")

    assert asyncio.run(scenario()) is False
    assert notifier.errors == ["Player is already a member"]


def test_remove_requires_confirmation() -> None:
    actions = _seeded()
    vm, notifier = _vm(actions)

    async def scenario():
        await vm.load()
        vm.request_remove("user-p1")
        vm.cancel_remove()
        first = await vm.confirm_remove()
        vm.request_remove("user-p1")
        second = await vm.confirm_remove()
        return first, second

    assert asyncio.run(scenario()) == (False, True)
    assert len(actions.calls_to("removePlayerFromProgram")) == 1
    assert vm.members == []
    assert notifier.successes == ["Removed"]
    assert not vm.remove_confirm.is_open


def test_members_are_cleared_when_reload_fails() -> None:
    actions = _seeded()
    vm, notifier = _vm(actions)
    asyncio.run(vm.load())
    actions.fail("listProgramMembers", ConnectionError("down"))

    asyncio.run(vm.select_program("prog-2"))

    assert vm.members == []
    assert notifier.errors == ["Failed to load members"]


def test_note_needs_points_or_comment() -> None:
    actions = _seeded()
    vm, notifier = _vm(actions)

    async def scenario():
        await vm.load()
        vm.open_note("user-p1")
        empty = await vm.submit_note()
        vm.note_dialog.set("points_delta", "lots")
        bad = await vm.submit_note()
        return empty, bad

    assert asyncio.run(scenario()) == (False, False)
    assert notifier.errors == ["Add a comment or points.", "Invalid points"]
    assert actions.calls_to("addCoachNoteToProgramPlayer") == []


def test_note_with_points_updates_total() -> None:
    actions = _seeded()
    vm, notifier = _vm(actions)

    async def scenario():
        await vm.load()
        vm.open_note("user-p1")
        vm.note_dialog.set("points_delta", "5")
        return await vm.submit_note()

    assert asyncio.run(scenario()) is True
    assert actions.calls_to("addCoachNoteToProgramPlayer") == [
        {"locale": "en", "programId": "prog-1", "userId": "user-p1", "pointsDelta": 5.0}
    ]
    assert vm.members[0].points_total == 45
    assert notifier.successes == ["Saved"]
    assert not vm.note_dialog.is_open


def test_academy_switch_reloads_programs_for_the_new_academy() -> None:
    actions = _seeded()
    actions.add_program("prog-3", "Swimming Squad", academy_id="ac-2")
    actions.add_member("prog-3", "user-p3")
    actions.current_academy_id = "ac-1"
    store = SharedStore()
    store.publish(CURRENT_ACADEMY_ID, "ac-1")
    vm = ProgramMembersVM(ProgramUseCases.from_actions(actions), notifier=RecordingNotifier(), store=store)

    async def scenario():
        await vm.mount()
        assert [p.id for p in vm.programs] == ["prog-1", "prog-2"]
        assert len(actions.calls_to("getPrograms")) == 1
        actions.current_academy_id = "ac-2"
        store.publish(CURRENT_ACADEMY_ID, "ac-2")
        await vm.scope.drain()

    asyncio.run(scenario())

    assert [p.id for p in vm.programs] == ["prog-3"]
    assert vm.selected_program_id == "prog-3"
    assert [m.user_id for m in vm.members] == ["user-p3"]


def test_unmounted_screen_stops_following_the_academy() -> None:
    store = SharedStore()
    vm = ProgramMembersVM(ProgramUseCases.from_actions(_seeded()), notifier=RecordingNotifier(), store=store)

    asyncio.run(vm.mount())
    vm.unmount()

    assert store.subscriber_count(CURRENT_ACADEMY_ID) == 0
