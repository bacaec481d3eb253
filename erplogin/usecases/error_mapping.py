"""Translate adapter errors into user-facing UseCaseError instances."""

from __future__ import annotations


from typing import Optional

from erplogin.adapters.api_errors import (
    INVALID_RESPONSE_MESSAGE,
    ApiError,
    ApiTimeoutError,
    ApiTransportError,
    AuthenticationError,
)
from erplogin.domain.errors import LoginErrorKind
from erplogin.domain.ports import UseCaseError

TIMEOUT_MESSAGE = "Request timed out. Check connection."
UNREACHABLE_MESSAGE = "Could not reach server. Check connection."


def map_api_error(
    exc: Exception,
    *,
    default_code: str,
    default_message: Optional[str] = None,
) -> UseCaseError:
    """Map adapter exceptions to stable UseCaseError codes.

    Server-reported and authentication messages are passed through verbatim;
    transport failures get a fixed connection hint.

    Args:
        exc (Exception): Exception raised by an adapter call.
        default_code (str): Code used for exceptions outside the adapter hierarchy.
        default_message (Optional[str]): Message used for such exceptions.

    Returns:
        UseCaseError: Error carrying a code, a message and a ``LoginErrorKind``.
    """
    if isinstance(exc, UseCaseError):
        return exc
    if isinstance(exc, ApiTimeoutError):
        return UseCaseError("REQUEST_TIMEOUT", TIMEOUT_MESSAGE, kind=LoginErrorKind.TRANSPORT)
    if isinstance(exc, ApiTransportError):
        return UseCaseError("TRANSPORT_FAILED", UNREACHABLE_MESSAGE, kind=LoginErrorKind.TRANSPORT)
    if isinstance(exc, AuthenticationError):
        return UseCaseError("AUTH_FAILED", exc.message, kind=LoginErrorKind.AUTHENTICATION)
    if isinstance(exc, ApiError):
        meta = {"status": exc.status} if exc.status is not None else None
        return UseCaseError(
            "SERVER_ERROR",
            exc.message or INVALID_RESPONSE_MESSAGE,
            kind=LoginErrorKind.SERVER,
            meta=meta,
        )

    message = default_message or str(exc) or "Unexpected error."
    return UseCaseError(default_code, message)


__all__ = ["TIMEOUT_MESSAGE", "UNREACHABLE_MESSAGE", "map_api_error"]
