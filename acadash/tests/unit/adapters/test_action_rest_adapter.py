from __future__ import annotations

import json
from typing import Any, Dict, List, Sequence

import pytest
from requests import exceptions as req_exc

from acadash.adapters.action_rest import ActionRestAdapter
from acadash.adapters.api_errors import ApiClientError, ApiError, ApiServerError, ApiTimeoutError


class _ResponseStub:
    def __init__(self, payload: Any, status_code: int = 200, *, text: str = "") -> None:
        self._payload = payload
        self.status_code = status_code
        self.text = text or str(payload)

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class _SessionStub:
    def __init__(self, responses: Sequence[Any]) -> None:
        self._responses = list(responses)
        self.calls: List[Dict[str, Any]] = []

    def post(self, url: str, *, data: Any = None, headers: Any = None, timeout: Any = None) -> _ResponseStub:
        self.calls.append({"url": url, "data": data, "headers": dict(headers or {}), "timeout": timeout})
        if not self._responses:
            raise RuntimeError("No stub response configured")
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def _adapter(responses: Sequence[Any], **kwargs: Any):
    adapter = ActionRestAdapter("https://academy.example.com/api/", api_key="secret", **kwargs)
    stub = _SessionStub(responses)
    adapter.session.session = stub  # type: ignore[assignment]
    return adapter, stub


def test_invoke_posts_json_to_action_path() -> None:
    adapter, stub = _adapter([_ResponseStub({"success": True, "academies": []})])

    result = adapter.invoke("getAllAcademies", {"locale": "ar"})

    assert result == {"success": True, "academies": []}
    call = stub.calls[0]
    assert call["url"] == "https://academy.example.com/api/actions/getAllAcademies"
    assert json.loads(call["data"]) == {"locale": "ar"}
    assert call["headers"]["Accept"] == "application/json"
    assert call["headers"]["Content-Type"] == "application/json"
    assert call["headers"]["X-API-Key"] == "secret"
    assert call["timeout"] == 10


def test_business_rejection_is_returned_unchanged() -> None:
    adapter, _ = _adapter([_ResponseStub({"success": False, "error": "Slug already taken"})])

    assert adapter.invoke("createAcademy", {"name": "A"}) == {"success": False, "error": "Slug already taken"}


def test_client_error_carries_code_and_hint() -> None:
    payload = {"error": "Forbidden", "code": "NOT_ADMIN"}
    adapter, _ = _adapter([_ResponseStub(payload, status_code=403)])

    with pytest.raises(ApiClientError) as info:
        adapter.invoke("deleteAcademy", {"academyId": "ac-1"})

    assert info.value.status == 403
    assert info.value.code == "NOT_ADMIN"
    assert info.value.hint == "Forbidden"
    assert "action[deleteAcademy]" in str(info.value)


def test_server_error_is_typed() -> None:
    adapter, _ = _adapter([_ResponseStub(ValueError("no json"), status_code=502, text="Bad gateway")])

    with pytest.raises(ApiServerError) as info:
        adapter.invoke("getPrograms")

    assert info.value.status == 502
    assert info.value.payload == "Bad gateway"


@pytest.mark.parametrize(
    "response",
    [
        _ResponseStub(ValueError("no json"), text="<html>"),
        _ResponseStub(["not", "an", "object"]),
        _ResponseStub({"academies": []}),
        _ResponseStub({"success": "yes"}),
    ],
)
def test_malformed_answers_raise_api_error(response: _ResponseStub) -> None:
    adapter, _ = _adapter([response])

    with pytest.raises(ApiError) as info:
        adapter.invoke("getAllAcademies")

    assert not isinstance(info.value, (ApiClientError, ApiServerError))


def test_timeout_without_retries_fails_after_one_attempt() -> None:
    adapter, stub = _adapter([req_exc.Timeout("slow")])

    with pytest.raises(ApiTimeoutError):
        adapter.invoke("getUnreadCounts")

    assert len(stub.calls) == 1


def test_connection_errors_are_retried_when_configured() -> None:
    adapter, stub = _adapter(
        [req_exc.ConnectionError("reset"), _ResponseStub({"success": True})], retries=1
    )

    assert adapter.invoke("getUnreadCounts") == {"success": True}
    assert len(stub.calls) == 2


def test_other_request_failures_are_not_retried() -> None:
    adapter, stub = _adapter([req_exc.InvalidURL("bad url"), _ResponseStub({"success": True})], retries=3)

    with pytest.raises(ApiError):
        adapter.invoke("getUnreadCounts")

    assert len(stub.calls) == 1


def test_blank_configuration_is_rejected() -> None:
    with pytest.raises(ValueError):
        ActionRestAdapter("  ")
    adapter, _ = _adapter([])
    with pytest.raises(ValueError):
        adapter.invoke(" / ")


def test_no_api_key_header_without_key() -> None:
    adapter = ActionRestAdapter("https://academy.example.com/api")
    stub = _SessionStub([_ResponseStub({"success": True})])
    adapter.session.session = stub  # type: ignore[assignment]

    adapter.invoke("getCourses")

    assert "X-API-Key" not in stub.calls[0]["headers"]
