from __future__ import annotations

import pytest

from acadash.viewmodels.settings_vm import SettingsVM


def test_apply_dict_coerces_values() -> None:
    vm = SettingsVM()

    vm.apply_dict(
        {
            "api_base_url": " https://academy.example.com/api/ ",
            "request_timeout_s": "15",
            "locale": "AR",
            "user_id": " user-admin ",
            "is_admin": "yes",
        }
    )

    assert vm.api_base_url == "https://academy.example.com/api"
    assert vm.request_timeout_s == 15
    assert vm.locale == "ar"
    assert vm.user_id == "user-admin"
    assert vm.is_admin is True
    assert vm.retries == 0


def test_apply_dict_rejects_unknown_keys_and_bad_values() -> None:
    vm = SettingsVM()

    with pytest.raises(ValueError, match="Unsupported settings keys: theme"):
        vm.apply_dict({"theme": "dark"})
    with pytest.raises(ValueError):
        vm.apply_dict({"locale": "fr"})
    with pytest.raises(ValueError):
        vm.apply_dict({"retries": -1})
    with pytest.raises(ValueError):
        vm.apply_dict({"autosave_idle_ms": True})


def test_env_overrides_connection_settings() -> None:
    vm = SettingsVM()
    vm.apply_dict({"api_base_url": "https://old.example.com"})

    vm.apply_env({"ACADASH_API_URL": "https://new.example.com/", "ACADASH_API_KEY": " k ", "ACADASH_LOCALE": ""})

    assert vm.api_base_url == "https://new.example.com"
    assert vm.api_key == "k"
    assert vm.locale == "en"


def test_save_round_trips_through_callback() -> None:
    saved = []
    vm = SettingsVM(on_save=saved.append)
    vm.apply_dict({"api_base_url": "https://academy.example.com", "user_id": "u1"})

    vm.cmd_save()

    restored = SettingsVM()
    restored.apply_dict(saved[0])
    assert restored.to_dict() == vm.to_dict()


def test_invalid_url_blocks_save() -> None:
    saved = []
    vm = SettingsVM(on_save=saved.append)
    vm.api_base_url = "academy.example.com"

    with pytest.raises(ValueError):
        vm.cmd_save()
    assert saved == []
