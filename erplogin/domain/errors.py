"""Domain-level error kinds shared by adapters, use cases and view-models.

Adapters tag every failure with one of these kinds so the layers above can
tell an unreachable server from a server-reported error and from a rejected
login without parsing message strings.
"""

from __future__ import annotations

from enum import Enum


class LoginErrorKind(str, Enum):
    """Classification of a failed authentication attempt."""

    TRANSPORT = "transport"
    SERVER = "server"
    AUTHENTICATION = "authentication"


__all__ = ["LoginErrorKind"]
