from __future__ import annotations

from typing import Any, Mapping, Optional

from erplogin.domain.errors import LoginErrorKind

INVALID_RESPONSE_MESSAGE = "Invalid response from server."
NULL_UID_MESSAGE = "User ID is null. Login failed."


class ApiError(RuntimeError):
    """Base class for JSON-RPC adapter failures."""

    kind: LoginErrorKind = LoginErrorKind.SERVER

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        code: Optional[str] = None,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code
        self.payload = payload
        self.context = context


class ApiTransportError(ApiError):
    """DNS, connection or other transport level failure."""

    kind = LoginErrorKind.TRANSPORT

    def __init__(
        self,
        message: str,
        *,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message, context=context)


class ApiTimeoutError(ApiTransportError):
    """The server did not answer within the configured timeout."""


class ApiClientError(ApiError):
    """Non-200, non-5xx HTTP status from the server."""

    def __init__(
        self,
        message: str,
        *,
        status: int,
        code: Optional[str] = None,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            status=status,
            code=code,
            payload=payload,
            context=context,
        )


class ApiServerError(ApiError):
    """HTTP 5xx from the server."""

    def __init__(
        self,
        message: str,
        *,
        status: int,
        code: Optional[str] = None,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            status=status,
            code=code,
            payload=payload,
            context=context,
        )


class RpcError(ApiError):
    """HTTP 200 carrying a JSON-RPC ``error`` member or no ``result``."""


class AuthenticationError(ApiError):
    """The server answered with a result whose ``uid`` is null."""

    kind = LoginErrorKind.AUTHENTICATION


def parse_error_payload(resp: Any) -> Any:
    """Best-effort extraction of a response body without raising."""
    try:
        return resp.json()
    except Exception:
        snippet = getattr(resp, "text", "")
        if not snippet:
            return None
        return snippet[:400]


def rpc_error_message(payload: Any) -> Optional[str]:
    """Return ``error.message`` (or ``error.data.message``) from a body."""
    error = _error_member(payload)
    if error is None:
        return None
    message = error.get("message")
    if isinstance(message, str) and message.strip():
        return message.strip()
    data = error.get("data")
    if isinstance(data, Mapping):
        nested = data.get("message")
        if isinstance(nested, str) and nested.strip():
            return nested.strip()
    return None


def extract_error_code(payload: Any) -> Optional[str]:
    error = _error_member(payload)
    if error is None:
        return None
    value = error.get("code")
    if value is not None:
        return value if isinstance(value, str) else str(value)
    data = error.get("data")
    if isinstance(data, Mapping) and isinstance(data.get("name"), str):
        return data["name"]
    return None


def _error_member(payload: Any) -> Optional[Mapping[str, Any]]:
    if not isinstance(payload, Mapping):
        return None
    error = payload.get("error")
    if isinstance(error, Mapping):
        return error
    return None
