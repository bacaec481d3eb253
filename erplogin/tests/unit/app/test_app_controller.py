from __future__ import annotations

from pathlib import Path

import pytest

from erplogin.adapters.auth_rpc import AuthRpcAdapter
from erplogin.adapters.auth_rpc_mock import AuthRpcMock
from erplogin.adapters.storage_local import StorageLocal
from erplogin.app.controller import AppController, load_settings
from erplogin.domain.ports import UseCaseError
from erplogin.domain.session import Credentials
from erplogin.viewmodels.settings_vm import SettingsVM


def test_controller_not_ready_without_server_url() -> None:
    controller = AppController(SettingsVM())

    assert controller.ensure_ready() is False
    assert controller.auth_port is None
    with pytest.raises(UseCaseError) as info:
        controller.authenticate(Credentials("demo", "admin", "admin"))
    assert info.value.code == "NOT_CONFIGURED"


def test_controller_ensure_ready_wires_rest_adapter() -> None:
    settings = SettingsVM()
    settings.server_url = "http://erp.local"
    settings.request_timeout_s = 7

    controller = AppController(settings)

    assert controller.ensure_ready() is True
    assert isinstance(controller.auth_port, AuthRpcAdapter)
    assert controller.auth_port.base_url == "http://erp.local"
    assert controller.auth_port.cfg.request_timeout_s == 7
    assert controller.uc_authenticate is not None


def test_zero_timeout_disables_timeout() -> None:
    settings = SettingsVM()
    settings.server_url = "http://erp.local"
    settings.request_timeout_s = 0

    controller = AppController(settings)
    controller.ensure_ready()

    assert isinstance(controller.auth_port, AuthRpcAdapter)
    assert controller.auth_port.cfg.request_timeout_s is None


def test_reset_rebuilds_from_current_settings() -> None:
    settings = SettingsVM()
    settings.server_url = "http://one.local"
    controller = AppController(settings)
    controller.ensure_ready()

    settings.server_url = "http://two.local"
    controller.reset()
    controller.ensure_ready()

    assert isinstance(controller.auth_port, AuthRpcAdapter)
    assert controller.auth_port.base_url == "http://two.local"


def test_demo_controller_logs_in_with_mock() -> None:
    controller = AppController.demo(SettingsVM())
    vm = controller.build_login_vm()
    vm.login = "admin"
    vm.password = "admin"

    outcome = vm.submit()

    assert outcome.ok
    assert isinstance(controller.auth_port, AuthRpcMock)
    assert vm.database == "demo"


def test_build_login_vm_uses_settings() -> None:
    settings = SettingsVM()
    settings.apply_dict({"server_url": "http://erp.local", "database": "prod", "post_login_path": "/app"})

    vm = AppController(settings).build_login_vm()

    assert vm.database == "prod"
    assert vm.destination == "/app"


def test_load_settings_merges_storage_and_environment(tmp_path: Path) -> None:
    storage = StorageLocal(root_dir=str(tmp_path))
    storage.save_user_settings({"server_url": "http://saved.local", "database": "saved"})

    settings = load_settings(
        storage,
        environ={"ERPLOGIN_DATABASE": "from-env", "ERPLOGIN_REQUEST_TIMEOUT_S": "5"},
    )

    assert settings.server_url == "http://saved.local"
    assert settings.database == "from-env"
    assert settings.request_timeout_s == 5


def test_load_settings_rejects_invalid_environment_url() -> None:
    with pytest.raises(ValueError):
        load_settings(None, environ={"ERPLOGIN_SERVER_URL": "not a url"})
