"""Domain value objects for login credentials and authenticated sessions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class Credentials:
    """Database name plus login/password pair sent to the server."""

    database: str
    login: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class Session:
    """Typed view over the ``result`` object of a successful authentication.

    ``payload`` is the server's ``result`` object exactly as received; the
    typed attributes are projections of it.
    """

    uid: int
    session_id: Optional[str]
    database: Optional[str]
    username: Optional[str]
    payload: Mapping[str, Any] = field(repr=False, compare=False)

    @classmethod
    def from_payload(
        cls,
        payload: Mapping[str, Any],
        *,
        cookie_session_id: Optional[str] = None,
    ) -> "Session":
        """Build a session from the authentication ``result`` object."""
        uid = payload.get("uid")
        if uid is None or isinstance(uid, bool):
            raise ValueError("Missing uid in authentication result.")
        try:
            uid_value = int(uid)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid uid in authentication result: {uid!r}") from exc

        def _as_text(value: Any) -> Optional[str]:
            if value is None or value is False:
                return None
            text = str(value).strip()
            return text or None

        return cls(
            uid=uid_value,
            session_id=_as_text(payload.get("session_id")) or _as_text(cookie_session_id),
            database=_as_text(payload.get("db")),
            username=_as_text(payload.get("username")),
            payload=payload,
        )


@dataclass(frozen=True)
class AuthReply:
    """What one authentication round trip produced.

    ``result`` is the server's ``result`` object unchanged; ``session_cookie``
    is the ``session_id`` cookie set on that same response, if any.
    """

    result: Mapping[str, Any]
    session_cookie: Optional[str] = None


__all__ = ["AuthReply", "Credentials", "Session"]
