"""NiceGUI runtime orchestration for the login client.

This module composes settings, storage, the app controller and login
view-models for the web runtime. It holds no NiceGUI imports so it can be
exercised without a browser.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Mapping, Optional

from erplogin.adapters.storage_local import StorageLocal
from erplogin.app.controller import AppController, load_settings
from erplogin.domain.login_state import LoginOutcome
from erplogin.utils import logging as logging_utils
from erplogin.viewmodels.login_vm import LoginVM
from erplogin.viewmodels.settings_vm import SettingsVM

LOGGER = logging.getLogger(__name__)
LOGIN_PATH = "/login"


class WebRuntime:
    """Process-wide state used by NiceGUI pages."""

    def __init__(
        self,
        *,
        demo: bool = False,
        storage: Optional[StorageLocal] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        env = os.environ if environ is None else environ
        self.storage = storage or StorageLocal(root_dir=env.get("ERPLOGIN_STORAGE_ROOT") or ".")
        self.settings_vm: SettingsVM = load_settings(self.storage, environ=env)
        self.settings_vm.on_save = self.storage.save_user_settings
        self.demo = demo
        self.controller = (
            AppController.demo(self.settings_vm) if demo else AppController(self.settings_vm)
        )
        self._apply_logging_preferences()

    # ------------------------------------------------------------------
    # Projections
    # ------------------------------------------------------------------
    def settings_payload(self) -> Dict[str, Any]:
        return self.settings_vm.to_dict()

    @property
    def post_login_path(self) -> str:
        return self.settings_vm.post_login_path

    def new_login_vm(self) -> LoginVM:
        """One view-model per page visit; the in-progress flag is per client."""
        return self.controller.build_login_vm()

    @staticmethod
    def session_summary(outcome: LoginOutcome) -> Dict[str, Any]:
        """UI-facing subset of a successful login kept in per-user storage.

        Holds no session identifier.
        """
        session = outcome.session
        if session is None:
            return {}
        return {
            "uid": session.uid,
            "username": session.username or "",
            "database": session.database or "",
        }

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------
    def apply_settings_payload(self, payload: Mapping[str, Any]) -> None:
        self.settings_vm.apply_dict(payload)
        self.controller.reset()
        self._apply_logging_preferences()

    def save_settings(self) -> None:
        self.settings_vm.cmd_save()
        LOGGER.info("Settings saved to %s", self.storage.settings_path)

    def _apply_logging_preferences(self) -> None:
        level = logging_utils.apply_gui_preferences(self.settings_vm.debug_logging)
        LOGGER.debug("Effective log level: %s", logging.getLevelName(level))
