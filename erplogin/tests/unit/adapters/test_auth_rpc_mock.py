from __future__ import annotations

import pytest

from erplogin.adapters.api_errors import AuthenticationError, RpcError
from erplogin.adapters.auth_rpc_mock import AuthRpcMock
from erplogin.domain.session import Credentials


def test_mock_accepts_known_user() -> None:
    mock = AuthRpcMock()

    reply = mock.authenticate(Credentials("demo", "admin", "admin"))

    assert reply.result["uid"] == 2
    assert reply.result["username"] == "admin"
    assert reply.session_cookie == reply.result["session_id"]


def test_mock_issues_a_new_session_per_login() -> None:
    mock = AuthRpcMock()
    creds = Credentials("demo", "admin", "admin")

    first = mock.authenticate(creds)
    second = mock.authenticate(creds)

    assert first.session_cookie != second.session_cookie
    assert mock.calls == 2


def test_mock_rejects_wrong_password_like_server() -> None:
    mock = AuthRpcMock()

    with pytest.raises(AuthenticationError):
        mock.authenticate(Credentials("demo", "admin", "nope"))


def test_mock_unknown_database_is_server_error() -> None:
    mock = AuthRpcMock()

    with pytest.raises(RpcError) as info:
        mock.authenticate(Credentials("prod", "admin", "admin"))

    assert "prod" in info.value.message
