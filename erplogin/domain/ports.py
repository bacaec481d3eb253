from __future__ import annotations
from typing import Any, Dict, Optional, Protocol

from .errors import LoginErrorKind
from .session import AuthReply, Credentials


# ---- Error model ----
class UseCaseError(Exception):
    """Base class for use case level errors (user-presentable)."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        kind: Optional[LoginErrorKind] = None,
        meta: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.kind = kind
        self.meta = meta


# ---- Ports (Hexagonal boundaries) ----
class AuthPort(Protocol):
    """JSON-RPC session authentication against the business server."""

    def authenticate(self, credentials: Credentials) -> AuthReply: ...  # one round trip, no shared state


class StoragePort(Protocol):
    """Persistence for user settings (never credentials)."""

    def save_user_settings(self, payload: Dict[str, Any]) -> None: ...
    def load_user_settings(self) -> Optional[Dict[str, Any]]: ...
