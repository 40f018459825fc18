"""Typed transport failures raised by the action adapter.

A non-2xx HTTP answer or a dropped connection is a transport failure and is
raised as one of these classes. A 2xx answer carrying ``success: false`` is a
business rejection and never reaches this module.
"""

from __future__ import annotations

from typing import Any, Optional

_SNIPPET = 400


class ApiError(RuntimeError):
    """Base class for action transport failures.

    ``action`` names the server action being called, when known.
    """

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        code: Optional[str] = None,
        hint: Optional[str] = None,
        payload: Any = None,
        action: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.code = code
        self.hint = hint
        self.payload = payload
        self.action = action

    @classmethod
    def from_response(cls, resp: Any, action: str) -> "ApiError":
        """Build the error matching a non-2xx response's status class."""
        status = int(resp.status_code)
        body = error_body(resp)
        message = describe(action, status, body)
        if 400 <= status < 500:
            return ApiClientError(
                message,
                status=status,
                code=error_code(body),
                hint=error_hint(body),
                payload=body,
                action=action,
            )
        if 500 <= status < 600:
            return ApiServerError(message, status=status, payload=body, action=action)
        return cls(message, status=status, payload=body, action=action)


class ApiClientError(ApiError):
    """HTTP 4xx: the request was refused (auth, validation, missing action)."""


class ApiServerError(ApiError):
    """HTTP 5xx from the action endpoint."""


class ApiTimeoutError(ApiError):
    """No HTTP answer: timeout or connection failure."""


def error_body(resp: Any) -> Any:
    """Decoded JSON error body, else a text snippet, else ``None``."""
    try:
        return resp.json()
    except ValueError:
        text = getattr(resp, "text", "") or ""
        return text[:_SNIPPET] or None


def describe(action: str, status: int, body: Any) -> str:
    detail = first_message(body)
    prefix = f"action[{action}]"
    return f"{prefix}: {detail} (HTTP {status})" if detail else f"{prefix}: HTTP {status}"


def error_code(body: Any) -> Optional[str]:
    if isinstance(body, dict):
        for key in ("code", "errorCode", "error_code"):
            if body.get(key) is not None:
                return str(body[key])
    return None


def error_hint(body: Any) -> Optional[str]:
    """Short text suitable for appending to a toast."""
    if isinstance(body, dict):
        for key in ("hint", "details", "errors", "error"):
            text = flatten(body.get(key))
            if text:
                return text
        return None
    return flatten(body)


def first_message(body: Any) -> Optional[str]:
    if isinstance(body, str):
        return body.strip() or None
    if isinstance(body, list):
        return next((msg for msg in map(first_message, body) if msg), None)
    if isinstance(body, dict):
        for key in ("error", "message", "detail", "title"):
            msg = first_message(body.get(key))
            if msg:
                return msg
    return None


def flatten(data: Any, *, limit: int = 200) -> Optional[str]:
    """Render nested error details as one line, truncated to ``limit``."""
    if data is None:
        return None
    if isinstance(data, list):
        text = "; ".join(filter(None, (flatten(item, limit=limit) for item in data[:3])))
    elif isinstance(data, dict):
        pairs = ((key, flatten(value, limit=limit)) for key, value in list(data.items())[:4])
        text = ", ".join(f"{key}={value}" for key, value in pairs if value)
    else:
        text = str(data).strip()
    return text[:limit] or None


__all__ = [
    "ApiClientError",
    "ApiError",
    "ApiServerError",
    "ApiTimeoutError",
    "describe",
    "error_body",
    "error_code",
    "error_hint",
    "first_message",
    "flatten",
]
