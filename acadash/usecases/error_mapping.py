"""Translate adapter errors into user-facing UseCaseError instances."""

from __future__ import annotations

from typing import Optional

from acadash.adapters.api_errors import ApiClientError, ApiError, ApiServerError, ApiTimeoutError, error_hint
from acadash.domain.ports import UseCaseError

_CLIENT_STATUS = {
    401: ("AUTH_FAILED", "Not signed in or not allowed."),
    403: ("AUTH_FAILED", "Not signed in or not allowed."),
}
_CLIENT_HINTED = {
    404: ("NOT_FOUND", "Not found"),
    422: ("INVALID_PARAMS", "Invalid parameters"),
}


def map_api_error(
    exc: Exception,
    *,
    default_code: str,
    default_message: Optional[str] = None,
) -> UseCaseError:
    """Map transport exceptions to stable UseCaseError codes.

    Args:
        exc: Exception raised by the action port.
        default_code: Code used for exceptions that are not ``ApiError``s.
        default_message: Message used for exceptions that are not ``ApiError``s.

    Returns:
        UseCaseError: ``exc`` itself when it already is one.
    """
    if isinstance(exc, UseCaseError):
        return exc
    if isinstance(exc, ApiTimeoutError):
        return UseCaseError("REQUEST_TIMEOUT", "Request timed out. Check connection.")
    if isinstance(exc, ApiClientError):
        status = exc.status or 0
        if status in _CLIENT_STATUS:
            return UseCaseError(*_CLIENT_STATUS[status])
        hint = exc.hint or error_hint(exc.payload)
        code, label = _CLIENT_HINTED.get(
            status, ("REQUEST_FAILED", f"Request failed (HTTP {status})" if status else "Request failed")
        )
        return UseCaseError(code, _with_hint(label, hint))
    if isinstance(exc, ApiServerError):
        return UseCaseError("SERVER_ERROR", "Server error, try again.")
    if isinstance(exc, ApiError):
        return UseCaseError("API_ERROR", str(exc))
    return UseCaseError(default_code, default_message or str(exc) or "Unexpected error.")


def _with_hint(label: str, hint: Optional[str]) -> str:
    hint_text = (hint or "").strip()
    return f"{label}: {hint_text}" if hint_text else f"{label}."


__all__ = ["map_api_error"]
