from __future__ import annotations

from acadash.adapters.action_rest import ActionRestAdapter
from acadash.adapters.actions_mock import InMemoryActions
from acadash.app.controller import AppController
from acadash.viewmodels.settings_vm import SettingsVM


def test_not_ready_without_base_url() -> None:
    controller = AppController(SettingsVM())

    assert controller.ensure_ready() is False
    assert controller.actions is None
    assert controller.uc_academies is None


def test_builds_rest_adapter_from_settings() -> None:
    settings = SettingsVM()
    settings.apply_dict(
        {"api_base_url": "https://academy.example.com/api", "api_key": "k", "request_timeout_s": 7, "retries": 1}
    )
    controller = AppController(settings)

    assert controller.ensure_ready() is True

    adapter = controller.actions
    assert isinstance(adapter, ActionRestAdapter)
    assert adapter.base_url == "https://academy.example.com/api"
    assert adapter.cfg.request_timeout_s == 7
    assert adapter.cfg.retries == 1
    assert adapter.session.api_key == "k"


def test_fixed_port_wins_and_reset_rebuilds() -> None:
    actions = InMemoryActions()
    settings = SettingsVM()
    controller = AppController(settings, actions=actions)

    assert controller.ensure_ready() is True
    first = controller.uc_courses
    assert controller.actions is actions

    controller.reset()
    assert controller.uc_courses is None
    assert controller.ensure_ready() is True
    assert controller.uc_courses is not first


def test_non_admin_reads_coach_member_lists() -> None:
    settings = SettingsVM()
    controller = AppController(settings, actions=InMemoryActions())
    controller.ensure_ready()
    assert controller.uc_programs.load_members.for_coach is True

    settings.is_admin = True
    controller.reset()
    controller.ensure_ready()
    assert controller.uc_programs.load_members.for_coach is False
