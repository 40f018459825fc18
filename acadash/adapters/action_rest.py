from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

import requests

from acadash.domain.ports import ActionName, ActionPort

from .api_errors import ApiError
from .http_client import HttpConfig, RetryingSession

LOGGER = logging.getLogger(__name__)


class ActionRestAdapter(ActionPort):
    """Call server actions as ``POST {base_url}/actions/{name}``.

    The body is the action's input object; the answer must be a JSON object
    with a boolean ``success``. HTTP failures raise typed ``ApiError``s, a
    ``success: false`` answer is returned unchanged for the use case to unwrap.
    """

    def __init__(
        self,
        base_url: str,
        *,
        api_key: Optional[str] = None,
        request_timeout_s: int = 10,
        retries: int = 0,
    ) -> None:
        if not base_url or not str(base_url).strip():
            raise ValueError("ActionRestAdapter requires an API base URL")
        self.base_url = str(base_url).strip().rstrip("/")
        self.cfg = HttpConfig(request_timeout_s=request_timeout_s, retries=retries)
        self.session = RetryingSession(api_key or None, self.cfg)

    def invoke(self, action: ActionName, payload: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        name = self._normalize_action(action)
        url = f"{self.base_url}/actions/{name}"
        LOGGER.debug("POST %s", url)
        resp = self.session.post(url, json_body=dict(payload or {}))
        if not 200 <= resp.status_code < 300:
            raise ApiError.from_response(resp, name)
        data = self._json_any(resp, name)
        if not isinstance(data, dict) or not isinstance(data.get("success"), bool):
            raise ApiError(f"action[{name}]: expected result envelope", payload=data, action=name)
        return data

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _normalize_action(action: str) -> str:
        cleaned = str(action or "").strip().strip("/")
        if not cleaned:
            raise ValueError("Action name must be a non-empty string.")
        return cleaned

    @staticmethod
    def _json_any(resp: requests.Response, action: str) -> Any:
        try:
            return resp.json()
        except ValueError as exc:
            snippet = (getattr(resp, "text", "") or "")[:400]
            raise ApiError(f"action[{action}]: invalid JSON response: {snippet}", action=action) from exc


__all__ = ["ActionRestAdapter"]
