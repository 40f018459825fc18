"""Shared HTTP transport for the action adapter.

Thin wrapper around ``requests.Session`` holding the timeout policy, the
optional API-key header and the attempt count. Callers map non-2xx answers
themselves.

Dependencies:
    - ``requests`` for network I/O.
    - ``acadash.adapters.api_errors.ApiTimeoutError`` for typed failures.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import requests
from requests import exceptions as req_exc

from acadash.adapters.api_errors import ApiError, ApiTimeoutError


@dataclass
class HttpConfig:
    """Timeout and retry configuration for action calls.

    Attributes:
        request_timeout_s: Timeout in seconds for one action call.
        retries: Extra attempts after a timeout/connection failure. Writes are
            not idempotent, so the dashboard runs with ``0``.
    """

    request_timeout_s: int = 10
    retries: int = 0


class RetryingSession:
    """``requests.Session`` wrapper with API-key headers and an attempt loop."""

    def __init__(self, api_key: Optional[str], cfg: HttpConfig) -> None:
        self.session = requests.Session()
        self.api_key = api_key
        self.cfg = cfg

    def _headers(self, json_body: bool = False) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["X-API-Key"] = self.api_key
        if json_body:
            headers["Content-Type"] = "application/json"
        return headers

    def post(
        self,
        url: str,
        *,
        json_body: Optional[Mapping[str, Any]] = None,
        timeout: Optional[int] = None,
    ) -> requests.Response:
        """Send a JSON POST.

        Raises:
            ApiTimeoutError: If every attempt fails with a timeout or
                connection error.
            ApiError: For any other ``requests`` failure.
        """
        data = None if json_body is None else json.dumps(dict(json_body), default=str)
        last_err: Optional[ApiError] = None
        for _ in range(max(0, self.cfg.retries) + 1):
            try:
                return self.session.post(
                    url,
                    data=data,
                    headers=self._headers(json_body=json_body is not None),
                    timeout=timeout or self.cfg.request_timeout_s,
                )
            except (req_exc.Timeout, req_exc.ConnectionError):
                last_err = ApiTimeoutError(f"Timeout contacting {url}")
            except req_exc.RequestException as exc:
                raise ApiError(f"POST {url}: {exc}") from exc
        assert last_err is not None
        raise last_err


__all__ = ["HttpConfig", "RetryingSession"]
