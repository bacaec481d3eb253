"""Login flow state values held by the presentation layer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .errors import LoginErrorKind
from .session import Session


class LoginPhase(str, Enum):
    IDLE = "idle"
    IN_PROGRESS = "in_progress"


@dataclass(frozen=True)
class LoginOutcome:
    """Result of one login attempt as seen by the UI owner."""

    session: Optional[Session] = None
    error: Optional[str] = None
    error_kind: Optional[LoginErrorKind] = None
    navigate_to: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.session is not None and self.error is None

    @classmethod
    def success(cls, session: Session, destination: str) -> "LoginOutcome":
        return cls(session=session, navigate_to=destination)

    @classmethod
    def failure(cls, message: str, kind: Optional[LoginErrorKind]) -> "LoginOutcome":
        return cls(error=message, error_kind=kind)


__all__ = ["LoginOutcome", "LoginPhase"]
