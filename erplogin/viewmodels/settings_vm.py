from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, replace
from typing import Any, Callable, Mapping, Optional

from ..domain.util import normalize_base_url
from ..utils.logging import env_level

DEFAULT_POST_LOGIN_PATH = "/home"


@dataclass
class SettingsConfig:
    """Typed runtime settings that persist via StorageLocal."""

    server_url: str = ""
    database: str = ""
    request_timeout_s: int = 30
    post_login_path: str = DEFAULT_POST_LOGIN_PATH


def _default_debug_logging() -> bool:
    level = env_level()
    return level is not None and level <= logging.DEBUG


class SettingsVM:
    """Keeps app settings UI state and validation, no I/O here."""

    def __init__(
        self,
        *,
        config: Optional[SettingsConfig] = None,
        on_save: Optional[Callable[[dict], None]] = None,
    ) -> None:
        self.config = config or SettingsConfig()
        self.on_save = on_save
        self.debug_logging: bool = _default_debug_logging()

    # ------------------------------------------------------------------
    # Properties bridging to the typed config
    # ------------------------------------------------------------------
    @property
    def server_url(self) -> str:
        return self.config.server_url

    @server_url.setter
    def server_url(self, value: str) -> None:
        self.config = replace(self.config, server_url=self._coerce_url(value))

    @property
    def database(self) -> str:
        return self.config.database

    @database.setter
    def database(self, value: str) -> None:
        self.config = replace(self.config, database=self._coerce_optional_str(value))

    @property
    def request_timeout_s(self) -> int:
        return self.config.request_timeout_s

    @request_timeout_s.setter
    def request_timeout_s(self, value: int) -> None:
        coerced = self._coerce_int("request_timeout_s", value, allow_negative=False)
        self.config = replace(self.config, request_timeout_s=coerced)

    @property
    def post_login_path(self) -> str:
        return self.config.post_login_path

    @post_login_path.setter
    def post_login_path(self, value: str) -> None:
        self.config = replace(self.config, post_login_path=self._coerce_path(value))

    # ------------------------------------------------------------------
    def is_configured(self) -> bool:
        return bool(self.server_url)

    def is_valid(self) -> bool:
        if self.request_timeout_s < 0:
            return False
        if not self.post_login_path.startswith("/"):
            return False
        return True

    def apply_dict(self, payload: Mapping[str, Any]) -> None:
        """Apply persisted settings to the view-model."""

        if not isinstance(payload, Mapping):
            raise ValueError("Settings payload must be a mapping of flat keys.")

        allowed_flat_keys = {
            *SettingsConfig.__annotations__.keys(),
            "debug_logging",
        }

        unknown = set(payload.keys()) - allowed_flat_keys
        if unknown:
            raise ValueError(f"Unsupported settings keys: {', '.join(sorted(str(key) for key in unknown))}")

        updates: dict = {}
        for cfg_key in SettingsConfig.__annotations__.keys():
            if cfg_key in payload:
                updates[cfg_key] = self._coerce_config_value(cfg_key, payload[cfg_key])

        if updates:
            self.config = replace(self.config, **updates)

        if "debug_logging" in payload:
            self.debug_logging = self._coerce_bool(payload["debug_logging"])

    def to_dict(self) -> dict:
        snapshot = asdict(self.config)
        snapshot["debug_logging"] = bool(self.debug_logging)
        return snapshot

    def cmd_save(self) -> None:
        if not self.is_valid():
            raise ValueError("Settings invalid")
        if self.on_save:
            self.on_save(self.to_dict())

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _coerce_config_value(self, key: str, raw: Any) -> Any:
        if key == "server_url":
            return self._coerce_url(raw)
        if key == "database":
            return self._coerce_optional_str(raw)
        if key == "request_timeout_s":
            return self._coerce_int(key, raw, allow_negative=False)
        if key == "post_login_path":
            return self._coerce_path(raw)
        raise ValueError(f"Unhandled config field: {key}")

    @staticmethod
    def _coerce_url(value: Any) -> str:
        text = SettingsVM._coerce_optional_str(value)
        if not text:
            return ""
        return normalize_base_url(text)

    @staticmethod
    def _coerce_path(value: Any) -> str:
        text = SettingsVM._coerce_optional_str(value) or DEFAULT_POST_LOGIN_PATH
        if not text.startswith("/"):
            raise ValueError("post_login_path must start with '/'.")
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
