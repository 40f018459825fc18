from __future__ import annotations

import json

import pytest

from acadash.adapters.storage_local import StorageLocal
from acadash.viewmodels.settings_vm import default_settings_payload


def test_missing_file_yields_defaults(tmp_path) -> None:
    storage = StorageLocal(str(tmp_path / "nested"))

    assert storage.load_user_settings() == default_settings_payload()


def test_save_then_load_keeps_unicode(tmp_path) -> None:
    storage = StorageLocal(str(tmp_path / "cfg"))
    payload = default_settings_payload()
    payload["api_base_url"] = "https://academy.example.com/api"
    payload["locale"] = "ar"
    payload["user_id"] = "مدير"

    storage.save_user_settings(payload)

    assert storage.load_user_settings() == payload
    raw = (tmp_path / "cfg" / "user_settings.json").read_text(encoding="utf-8")
    assert "مدير" in raw
    assert [p.name for p in (tmp_path / "cfg").iterdir()] == ["user_settings.json"]


def test_non_object_file_is_rejected(tmp_path) -> None:
    (tmp_path / "user_settings.json").write_text(json.dumps([1, 2]), encoding="utf-8")

    with pytest.raises(ValueError):
        StorageLocal(str(tmp_path)).load_user_settings()
