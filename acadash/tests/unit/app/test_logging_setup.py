from __future__ import annotations

import logging

from acadash.utils.logging import apply_debug_toggle, env_forces_debug, env_level, parse_level


def test_parse_level_accepts_names_and_numbers() -> None:
    assert parse_level("debug") == logging.DEBUG
    assert parse_level(" 30 ") == 30
    assert parse_level("chatty") == logging.INFO
    assert parse_level(None, logging.ERROR) == logging.ERROR


def test_env_level_precedence() -> None:
    assert env_level({}) is None
    assert env_level({"ACADASH_DEBUG": "yes"}) == logging.DEBUG
    assert env_level({"ACADASH_LOG_LEVEL": "warning", "ACADASH_DEBUG": "1"}) == logging.WARNING
    assert env_forces_debug({"ACADASH_DEBUG": "on"}) is True
    assert env_forces_debug({"ACADASH_LOG_LEVEL": "error"}) is False


def test_debug_toggle_yields_to_environment(monkeypatch) -> None:
    root = logging.getLogger()
    previous = root.level
    try:
        monkeypatch.delenv("ACADASH_LOG_LEVEL", raising=False)
        monkeypatch.delenv("ACADASH_DEBUG", raising=False)
        assert apply_debug_toggle(True) == logging.DEBUG
        assert apply_debug_toggle(False) == logging.INFO

        monkeypatch.setenv("ACADASH_LOG_LEVEL", "ERROR")
        assert apply_debug_toggle(True) == logging.ERROR
        assert root.level == logging.ERROR
    finally:
        root.setLevel(previous)
