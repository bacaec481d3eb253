"""Domain package exports for value objects and error kinds."""

from .errors import LoginErrorKind
from .login_state import LoginOutcome, LoginPhase
from .session import AuthReply, Credentials, Session

__all__ = [
    "AuthReply",
    "Credentials",
    "LoginErrorKind",
    "LoginOutcome",
    "LoginPhase",
    "Session",
]
