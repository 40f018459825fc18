from __future__ import annotations

import os
from dataclasses import asdict, dataclass, replace
from typing import Any, Callable, Dict, Mapping, Optional

from ..utils.logging import env_forces_debug

SUPPORTED_LOCALES: tuple[str, ...] = ("en", "ar")

ENV_API_URL = "ACADASH_API_URL"
ENV_API_KEY = "ACADASH_API_KEY"
ENV_LOCALE = "ACADASH_LOCALE"


@dataclass
class SettingsConfig:
    """Typed runtime settings that persist via StorageLocal."""

    api_base_url: str = ""
    request_timeout_s: int = 10
    retries: int = 0
    locale: str = "en"
    autosave_idle_ms: int = 1500
    message_poll_ms: int = 5000
    unread_poll_ms: int = 60000


_INT_FIELDS = {"request_timeout_s", "retries", "autosave_idle_ms", "message_poll_ms", "unread_poll_ms"}


def _default_debug_logging() -> bool:
    return env_forces_debug()


class SettingsVM:
    """Keeps app settings state and validation, no I/O here."""

    def __init__(
        self,
        *,
        config: Optional[SettingsConfig] = None,
        on_save: Optional[Callable[[dict], None]] = None,
    ) -> None:
        self.config = config or SettingsConfig()
        self.on_save = on_save

        self.api_key: str = ""
        self.user_id: str = ""
        self.is_admin: bool = False
        self.debug_logging: bool = _default_debug_logging()

    # ------------------------------------------------------------------
    # Properties bridging to the typed config
    # ------------------------------------------------------------------
    @property
    def api_base_url(self) -> str:
        return self.config.api_base_url

    @api_base_url.setter
    def api_base_url(self, value: str) -> None:
        self.config = replace(self.config, api_base_url=self._coerce_url(value))

    @property
    def request_timeout_s(self) -> int:
        return self.config.request_timeout_s

    @request_timeout_s.setter
    def request_timeout_s(self, value: int) -> None:
        coerced = self._coerce_int("request_timeout_s", value, allow_negative=False)
        self.config = replace(self.config, request_timeout_s=coerced)

    @property
    def retries(self) -> int:
        return self.config.retries

    @retries.setter
    def retries(self, value: int) -> None:
        self.config = replace(self.config, retries=self._coerce_int("retries", value, allow_negative=False))

    @property
    def locale(self) -> str:
        return self.config.locale

    @locale.setter
    def locale(self, value: str) -> None:
        self.config = replace(self.config, locale=self._coerce_locale(value))

    @property
    def autosave_idle_ms(self) -> int:
        return self.config.autosave_idle_ms

    @property
    def message_poll_ms(self) -> int:
        return self.config.message_poll_ms

    @property
    def unread_poll_ms(self) -> int:
        return self.config.unread_poll_ms

    # ------------------------------------------------------------------
    def is_valid(self) -> bool:
        if self.api_base_url and not self.api_base_url.startswith(("http://", "https://")):
            return False
        if self.autosave_idle_ms <= 0 or self.message_poll_ms <= 0 or self.unread_poll_ms <= 0:
            return False
        return True

    def apply_dict(self, payload: Mapping[str, Any]) -> None:
        """Apply persisted settings to the view-model."""

        if not isinstance(payload, Mapping):
            raise ValueError("Settings payload must be a mapping of flat keys.")

        allowed_flat_keys = {
            *SettingsConfig.__annotations__.keys(),
            "api_key",
            "user_id",
            "is_admin",
            "debug_logging",
        }

        unknown = set(payload.keys()) - allowed_flat_keys
        if unknown:
            raise ValueError(f"Unsupported settings keys: {', '.join(sorted(str(key) for key in unknown))}")

        updates: Dict[str, Any] = {}
        for cfg_key in SettingsConfig.__annotations__.keys():
            if cfg_key in payload:
                updates[cfg_key] = self._coerce_config_value(cfg_key, payload[cfg_key])

        if updates:
            self.config = replace(self.config, **updates)

        if "api_key" in payload:
            self.api_key = self._coerce_optional_str(payload["api_key"])

        if "user_id" in payload:
            self.user_id = self._coerce_optional_str(payload["user_id"])

        if "is_admin" in payload:
            self.is_admin = self._coerce_bool(payload["is_admin"])

        if "debug_logging" in payload:
            self.debug_logging = self._coerce_bool(payload["debug_logging"])

    def apply_env(self, environ: Optional[Mapping[str, str]] = None) -> None:
        """Override connection settings from ``ACADASH_*`` environment variables."""
        env = os.environ if environ is None else environ
        if env.get(ENV_API_URL):
            self.api_base_url = env[ENV_API_URL]
        if env.get(ENV_API_KEY):
            self.api_key = env[ENV_API_KEY].strip()
        if env.get(ENV_LOCALE):
            self.locale = env[ENV_LOCALE]

    def to_dict(self) -> dict:
        snapshot = asdict(self.config)
        snapshot.update(
            {
                "api_key": self.api_key,
                "user_id": self.user_id,
                "is_admin": bool(self.is_admin),
                "debug_logging": bool(self.debug_logging),
            }
        )
        return snapshot

    def set_debug_logging(self, enabled: bool) -> None:
        self.debug_logging = self._coerce_bool(enabled)

    def cmd_save(self) -> None:
        if not self.is_valid():
            raise ValueError("Settings invalid")
        if self.on_save:
            self.on_save(self.to_dict())

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _coerce_config_value(self, key: str, raw: Any) -> Any:
        if key == "api_base_url":
            return self._coerce_url(raw)
        if key == "locale":
            return self._coerce_locale(raw)
        if key in _INT_FIELDS:
            return self._coerce_int(key, raw, allow_negative=False)
        raise ValueError(f"Unhandled config field: {key}")

    @staticmethod
    def _coerce_url(value: Any) -> str:
        if value is None:
            return ""
        if not isinstance(value, str):
            raise ValueError("api_base_url must be a string.")
        return value.strip().rstrip("/")

    @staticmethod
    def _coerce_locale(value: Any) -> str:
        text = str(value or "").strip().lower()
        if text not in SUPPORTED_LOCALES:
            raise ValueError(f"locale must be one of: {', '.join(SUPPORTED_LOCALES)}.")
        return text

    @staticmethod
    def _coerce_optional_str(value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @staticmethod
    def _coerce_bool(value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return bool(value)
        if isinstance(value, str):
            return value.strip().lower() in {"1", "true", "yes", "on"}
        return bool(value)

    @staticmethod
    def _coerce_int(name: str, value: Any, *, allow_negative: bool = True) -> int:
        if isinstance(value, bool):
            raise ValueError(f"{name} must be an integer.")
        if isinstance(value, (int, float)):
            coerced = int(value)
        elif isinstance(value, str):
            try:
                coerced = int(value.strip())
            except (TypeError, ValueError) as exc:
                raise ValueError(f"{name} must be an integer.") from exc
        else:
            raise ValueError(f"{name} must be an integer.")
        if not allow_negative and coerced < 0:
            raise ValueError(f"{name} must be non-negative.")
        return coerced


def default_settings_payload() -> dict:
    """Return a fresh snapshot containing the default settings payload."""
    return SettingsVM().to_dict()
