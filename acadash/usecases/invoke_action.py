"""Single entry point every use case goes through to reach an action.

``call_action`` turns the three outcomes of an action call into Python
control flow:

* ``{"success": true, ...}``  -> the payload dict (envelope keys removed)
* ``{"success": false, ...}`` -> ``ActionRejected`` carrying the server text
* any raised exception        -> ``UseCaseError`` via ``map_api_error``
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError as SchemaError

from acadash.adapters.action_schemas import parse_envelope
from acadash.domain.ports import ActionPort, ActionRejected, UseCaseError
from acadash.usecases.error_mapping import map_api_error

LOGGER = logging.getLogger(__name__)


def drop_unset(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Remove ``None`` values so optional inputs are omitted, not sent as null."""
    return {key: value for key, value in payload.items() if value is not None}


def call_action(
    port: ActionPort,
    action: str,
    payload: Optional[Mapping[str, Any]] = None,
    *,
    default_code: str = "ACTION_FAILED",
) -> Dict[str, Any]:
    body = drop_unset(payload or {})
    try:
        raw = port.invoke(action, body)
    except UseCaseError:
        raise
    except Exception as exc:
        LOGGER.debug("Action %s raised %s", action, exc.__class__.__name__)
        raise map_api_error(exc, default_code=default_code) from exc

    try:
        envelope = parse_envelope(raw)
    except SchemaError as exc:
        raise UseCaseError("INVALID_RESPONSE", f"{action}: malformed result.") from exc
    if not envelope.success:
        LOGGER.warning("Action %s rejected: %s", action, envelope.error)
        raise ActionRejected(action, envelope.error)
    return envelope.payload()


def parse_payload(action: str, parser, *args: Any) -> Any:
    """Run a schema parser over payload data, mapping schema errors."""
    try:
        return parser(*args)
    except SchemaError as exc:
        raise UseCaseError("INVALID_RESPONSE", f"{action}: malformed result.") from exc


__all__ = ["call_action", "drop_unset", "parse_payload"]
