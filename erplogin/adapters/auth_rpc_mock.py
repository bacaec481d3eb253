from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict
from uuid import uuid4

from erplogin.domain.ports import AuthPort
from erplogin.domain.session import AuthReply, Credentials

from .api_errors import NULL_UID_MESSAGE, AuthenticationError, RpcError

DEMO_DATABASE = "demo"


@dataclass
class AuthRpcMock(AuthPort):
    """Offline substitute for ``AuthRpcAdapter`` with an in-memory user table.

    Mirrors the server's answers: an unknown database yields a server error,
    a wrong password yields a result with a null ``uid``.
    """

    database: str = DEMO_DATABASE
    users: Dict[str, str] = field(default_factory=lambda: {"admin": "admin"})

    def __post_init__(self) -> None:
        self._uids: Dict[str, int] = {
            login: index for index, login in enumerate(sorted(self.users), start=2)
        }
        self.calls = 0

    # ---------- AuthPort ----------

    def authenticate(self, credentials: Credentials) -> AuthReply:
        self.calls += 1
        ctx = f"authenticate[{credentials.database}]"
        if credentials.database != self.database:
            raise RpcError(
                f'database "{credentials.database}" does not exist',
                code="200",
                context=ctx,
            )
        if self.users.get(credentials.login) != credentials.password:
            raise AuthenticationError(NULL_UID_MESSAGE, status=200, context=ctx)

        session_id = uuid4().hex
        result = {
            "uid": self._uids[credentials.login],
            "session_id": session_id,
            "db": credentials.database,
            "username": credentials.login,
            "is_admin": credentials.login == "admin",
        }
        return AuthReply(result=result, session_cookie=session_id)
