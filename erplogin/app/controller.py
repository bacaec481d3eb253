"""Adapter and use-case wiring for the login runtime.

This module owns lazy construction of the JSON-RPC adapter and the
authentication use case from values in
:class:`erplogin.viewmodels.settings_vm.SettingsVM`, and builds the single
process-wide settings object from persisted settings plus environment
overrides. It is invoked by the web runtime and the CLI.
"""

from __future__ import annotations

import logging
import os
from typing import Callable, Mapping, Optional

from ..adapters.auth_rpc import AuthRpcAdapter
from ..adapters.auth_rpc_mock import DEMO_DATABASE, AuthRpcMock
from ..domain.ports import AuthPort, StoragePort, UseCaseError
from ..domain.session import Credentials, Session
from ..usecases.authenticate import Authenticate
from ..viewmodels.login_vm import LoginVM
from ..viewmodels.settings_vm import SettingsVM

ENV_OVERRIDES = {
    "ERPLOGIN_SERVER_URL": "server_url",
    "ERPLOGIN_DATABASE": "database",
    "ERPLOGIN_REQUEST_TIMEOUT_S": "request_timeout_s",
}
DEMO_SERVER_URL = "http://demo.invalid"

_log = logging.getLogger(__name__)


def load_settings(
    storage: Optional[StoragePort] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
) -> SettingsVM:
    """Build settings from defaults, persisted values, then environment.

    Raises:
        ValueError: If a persisted or environment value fails validation.
    """
    settings_vm = SettingsVM()
    if storage is not None:
        payload = storage.load_user_settings()
        if payload:
            settings_vm.apply_dict(payload)
    env = os.environ if environ is None else environ
    overrides = {key: env[var] for var, key in ENV_OVERRIDES.items() if env.get(var)}
    if overrides:
        _log.debug("Settings overridden from environment: %s", ", ".join(sorted(overrides)))
        settings_vm.apply_dict(overrides)
    return settings_vm


class AppController:
    """Create and cache the runtime adapter/use-case from settings state.

    Call chain:
        ``WebRuntime`` and the CLI create one instance per process and call
        ``build_login_vm``; the login view-model triggers ``authenticate``
        which wires dependencies on first use.
    """

    def __init__(
        self,
        settings_vm: SettingsVM,
        *,
        auth_port_factory: Optional[Callable[[SettingsVM], AuthPort]] = None,
    ) -> None:
        """Initialize controller with settings-backed lazy dependencies.

        Args:
            settings_vm: Settings holding the server address, database and
                request timeout.
            auth_port_factory: Optional override building the ``AuthPort``
                (used for demo mode and tests).
        """
        self.settings_vm = settings_vm
        self._auth_port_factory = auth_port_factory or _rest_auth_port
        self._auth_port: Optional[AuthPort] = None
        self.uc_authenticate: Optional[Authenticate] = None

    @classmethod
    def demo(cls, settings_vm: SettingsVM) -> "AppController":
        """Controller backed by the offline ``AuthRpcMock``."""
        if not settings_vm.server_url:
            settings_vm.server_url = DEMO_SERVER_URL
        if not settings_vm.database:
            settings_vm.database = DEMO_DATABASE
        mock = AuthRpcMock()
        return cls(settings_vm, auth_port_factory=lambda _settings: mock)

    @property
    def auth_port(self) -> Optional[AuthPort]:
        return self._auth_port

    def reset(self) -> None:
        """Drop cached adapter/use-case so the next call rebuilds from settings."""
        self._auth_port = None
        self.uc_authenticate = None

    def ensure_ready(self) -> bool:
        """Ensure the adapter/use-case are available.

        Returns:
            ``True`` when dependencies are available, ``False`` when the server
            address is missing from settings.
        """
        if self._auth_port is not None and self.uc_authenticate is not None:
            return True
        if not self.settings_vm.is_configured():
            return False
        self._auth_port = self._auth_port_factory(self.settings_vm)
        self.uc_authenticate = Authenticate(self._auth_port)
        return True

    def authenticate(self, credentials: Credentials) -> Session:
        if not self.ensure_ready():
            raise UseCaseError(
                "NOT_CONFIGURED",
                "Configure the server address first.",
            )
        assert self.uc_authenticate is not None
        return self.uc_authenticate(credentials)

    def build_login_vm(self) -> LoginVM:
        return LoginVM(
            authenticate=self.authenticate,
            database=self.settings_vm.database,
            destination=self.settings_vm.post_login_path,
        )


def _rest_auth_port(settings_vm: SettingsVM) -> AuthPort:
    # 0 disables the timeout
    timeout = settings_vm.request_timeout_s or None
    return AuthRpcAdapter(settings_vm.server_url, request_timeout_s=timeout)
