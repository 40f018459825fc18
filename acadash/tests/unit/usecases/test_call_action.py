from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

import pytest

from acadash.adapters.api_errors import ApiClientError, ApiServerError, ApiTimeoutError
from acadash.domain.ports import ActionPort, ActionRejected, UseCaseError
from acadash.usecases.academies import AcademyUseCases
from acadash.usecases.attendance import AttendanceUseCases
from acadash.usecases.invoke_action import call_action, drop_unset
from acadash.usecases.notifications import NotificationUseCases


class _PortStub(ActionPort):
    def __init__(self, answer: Any) -> None:
        self.answer = answer
        self.calls: List[Dict[str, Any]] = []

    def invoke(self, action: str, payload: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        self.calls.append({"action": action, "payload": dict(payload or {})})
        if isinstance(self.answer, Exception):
            raise self.answer
        return self.answer


def test_drop_unset_keeps_falsy_values() -> None:
    assert drop_unset({"a": None, "b": False, "c": 0, "d": ""}) == {"b": False, "c": 0, "d": ""}


def test_success_returns_payload_without_envelope() -> None:
    port = _PortStub({"success": True, "academies": [], "managersByAcademyId": {}})

    payload = call_action(port, "getAllAcademies", {"locale": "en", "slug": None})

    assert payload == {"academies": [], "managersByAcademyId": {}}
    assert port.calls == [{"action": "getAllAcademies", "payload": {"locale": "en"}}]


def test_rejection_carries_server_message(caplog) -> None:
    port = _PortStub({"success": False, "error": "Slug already taken"})

    with caplog.at_level(logging.WARNING, logger="acadash.usecases.invoke_action"):
        with pytest.raises(ActionRejected) as info:
            call_action(port, "createAcademy", {"name": "A"})

    assert info.value.code == "ACTION_REJECTED"
    assert info.value.server_message == "Slug already taken"
    assert info.value.message == "Slug already taken"
    assert "createAcademy rejected" in caplog.text


def test_rejection_without_text_has_generic_message() -> None:
    port = _PortStub({"success": False})

    with pytest.raises(ActionRejected) as info:
        call_action(port, "deleteAcademy")

    assert info.value.server_message is None
    assert info.value.message == "deleteAcademy was rejected."


@pytest.mark.parametrize("answer", [{"academies": []}, ["success"], {"success": "maybe"}])
def test_malformed_envelope_is_invalid_response(answer: Any) -> None:
    with pytest.raises(UseCaseError) as info:
        call_action(_PortStub(answer), "getAllAcademies")

    assert info.value.code == "INVALID_RESPONSE"
    assert not isinstance(info.value, ActionRejected)


@pytest.mark.parametrize(
    ("exc", "code", "message"),
    [
        (ApiTimeoutError("slow"), "REQUEST_TIMEOUT", "Request timed out. Check connection."),
        (ApiClientError("x", status=401), "AUTH_FAILED", "Not signed in or not allowed."),
        (ApiClientError("x", status=404, hint="academy"), "NOT_FOUND", "Not found: academy"),
        (ApiClientError("x", status=422, payload={"error": "name"}), "INVALID_PARAMS", "Invalid parameters: name"),
        (ApiClientError("x", status=409), "REQUEST_FAILED", "Request failed (HTTP 409)."),
        (ApiServerError("x", status=500), "SERVER_ERROR", "Server error, try again."),
        (ConnectionError("socket closed"), "SAVE_FAILED", "socket closed"),
    ],
)
def test_transport_failures_are_mapped(exc: Exception, code: str, message: str) -> None:
    with pytest.raises(UseCaseError) as info:
        call_action(_PortStub(exc), "saveProgramAttendance", default_code="SAVE_FAILED")

    assert info.value.code == code
    assert info.value.message == message
    assert info.value.__cause__ is exc


def test_malformed_item_in_payload_is_invalid_response() -> None:
    port = _PortStub({"success": True, "academies": [{"name": "missing id"}]})

    with pytest.raises(UseCaseError) as info:
        AcademyUseCases.from_actions(port).load()

    assert info.value.code == "INVALID_RESPONSE"


def test_unread_counts_default_to_zero() -> None:
    port = _PortStub({"success": True, "notifications": 3})

    counts = NotificationUseCases.from_actions(port).load_unread_counts()

    assert counts.notifications == 3
    assert counts.messages == 0


def test_attendance_summary_is_keyed_by_user() -> None:
    port = _PortStub({"success": True, "byUserId": {"user-p1": {"attended": 3, "marked": 4}}})

    summary = AttendanceUseCases.from_actions(port).load_summary("prog-1", locale="en")

    assert summary["user-p1"].attended == 3
    assert summary["user-p1"].marked == 4


@pytest.mark.parametrize("by_user", [["user-p1"], "user-p1", 7, {"user-p1": "three"}])
def test_attendance_summary_of_wrong_shape_is_invalid_response(by_user: Any) -> None:
    port = _PortStub({"success": True, "byUserId": by_user})

    with pytest.raises(UseCaseError) as info:
        AttendanceUseCases.from_actions(port).load_summary("prog-1", locale="en")

    assert info.value.code == "INVALID_RESPONSE"


@pytest.mark.parametrize("records", [7, "absent", {"userId": "user-p1"}])
def test_attendance_records_that_are_not_a_list_are_invalid_response(records: Any) -> None:
    port = _PortStub({"success": True, "records": records})

    with pytest.raises(UseCaseError) as info:
        AttendanceUseCases.from_actions(port).load("prog-1", "2026-03-01", locale="en")

    assert info.value.code == "INVALID_RESPONSE"
