from __future__ import annotations
from typing import Any, Dict, Mapping, Optional, Protocol

AcademyId = str
ProgramId = str
UserId = str
ActionName = str


# ---- Error model ----
class UseCaseError(Exception):
    """Base class for use case level errors (user-presentable)."""

    def __init__(self, code: str, message: str, meta: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.meta = meta or {}


class ValidationError(UseCaseError):
    """Local form validation failed; the action was never called."""

    def __init__(self, message: str, *, field: Optional[str] = None):
        super().__init__("VALIDATION_FAILED", message, meta={"field": field} if field else None)
        self.field = field


class ActionRejected(UseCaseError):
    """The action answered ``success: false``.

    ``server_message`` holds the server text verbatim, or ``None`` when the
    server did not provide one.
    """

    def __init__(self, action: str, server_message: Optional[str]):
        super().__init__(
            "ACTION_REJECTED",
            server_message or f"{action} was rejected.",
            meta={"action": action},
        )
        self.action = action
        self.server_message = server_message


# ---- Ports (Hexagonal boundaries) ----
class ActionPort(Protocol):
    """Invoke a named server action with a plain JSON-compatible payload.

    Returns the raw result envelope ``{"success": bool, ...}``. Transport
    failures raise; business rejections are returned, not raised.
    """

    def invoke(self, action: ActionName, payload: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]: ...


class Notifier(Protocol):
    """Transient user-facing notifications (toasts)."""

    def success(self, message: str) -> None: ...
    def error(self, message: str) -> None: ...


class SettingsStoragePort(Protocol):
    """Persistence for user settings."""

    def save_user_settings(self, payload: Dict[str, Any]) -> None: ...
    def load_user_settings(self) -> Dict[str, Any]: ...
