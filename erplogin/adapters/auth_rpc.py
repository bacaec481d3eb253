"""JSON-RPC adapter for the server's session authentication endpoint.

Dependencies:
    - ``requests`` through :class:`erplogin.adapters.http_client.JsonSession`.
    - ``erplogin.adapters.api_errors`` for typed failures.

Call context:
    Built by :class:`erplogin.app.controller.AppController` from settings and
    consumed by :class:`erplogin.usecases.authenticate.Authenticate` through
    the ``AuthPort`` protocol.
"""

from __future__ import annotations

import itertools
import logging
from typing import Any, Dict, Mapping, Optional

import requests

from erplogin.domain.ports import AuthPort
from erplogin.domain.session import AuthReply, Credentials
from erplogin.domain.util import normalize_base_url

from .api_errors import (
    INVALID_RESPONSE_MESSAGE,
    NULL_UID_MESSAGE,
    ApiClientError,
    ApiServerError,
    AuthenticationError,
    RpcError,
    extract_error_code,
    parse_error_payload,
    rpc_error_message,
)
from .http_client import HttpConfig, JsonSession

AUTHENTICATE_PATH = "/web/session/authenticate"
SESSION_COOKIE = "session_id"

_log = logging.getLogger(__name__)


def build_call_payload(params: Mapping[str, Any], request_id: int) -> Dict[str, Any]:
    """Wrap ``params`` in a JSON-RPC 2.0 ``call`` envelope."""
    return {
        "jsonrpc": "2.0",
        "method": "call",
        "params": dict(params),
        "id": request_id,
    }


class AuthRpcAdapter(AuthPort):
    """Adapter performing one ``/web/session/authenticate`` round trip per call."""

    def __init__(
        self,
        base_url: str,
        *,
        request_timeout_s: Optional[float] = 30,
    ) -> None:
        self.base_url = normalize_base_url(base_url)
        self.cfg = HttpConfig(request_timeout_s=request_timeout_s)
        self.session = JsonSession(self.cfg)
        self._ids = itertools.count(1)

    @property
    def authenticate_url(self) -> str:
        return f"{self.base_url}{AUTHENTICATE_PATH}"

    def authenticate(self, credentials: Credentials) -> AuthReply:
        """Authenticate ``credentials`` and return the server's answer.

        Args:
            credentials: Database name, login and password.

        Returns:
            ``AuthReply`` with the decoded ``result`` object, unchanged, and
            the ``session_id`` cookie of this response.

        Raises:
            ApiTransportError: Transport failure (no response received).
            ApiClientError / ApiServerError: Non-200 HTTP status.
            RpcError: HTTP 200 with an ``error`` member or without ``result``.
            AuthenticationError: ``result.uid`` is null, ``false`` or missing.
        """
        url = self.authenticate_url
        ctx = f"authenticate[{credentials.database}]"
        payload = build_call_payload(
            {
                "db": credentials.database,
                "login": credentials.login,
                "password": credentials.password,
            },
            next(self._ids),
        )
        resp = self.session.post(url, json_body=payload)
        _log.debug("%s: HTTP %s", ctx, resp.status_code)

        self._ensure_ok(resp, ctx)
        body = parse_error_payload(resp)
        if not isinstance(body, Mapping) or body.get("error") is not None or body.get("result") is None:
            raise RpcError(
                rpc_error_message(body) or INVALID_RESPONSE_MESSAGE,
                status=resp.status_code,
                code=extract_error_code(body),
                payload=body,
                context=ctx,
            )

        result = body["result"]
        if not isinstance(result, Mapping):
            raise RpcError(
                INVALID_RESPONSE_MESSAGE,
                status=resp.status_code,
                payload=body,
                context=ctx,
            )
        uid = result.get("uid")
        if uid is None or uid is False:
            raise AuthenticationError(
                NULL_UID_MESSAGE,
                status=resp.status_code,
                payload=body,
                context=ctx,
            )

        return AuthReply(result=result, session_cookie=self._session_cookie(resp))

    @staticmethod
    def _ensure_ok(resp: requests.Response, ctx: str) -> None:
        status = resp.status_code
        if status == 200:
            return
        payload = parse_error_payload(resp)
        message = rpc_error_message(payload) or INVALID_RESPONSE_MESSAGE
        code = extract_error_code(payload)
        if 500 <= status < 600:
            raise ApiServerError(
                message,
                status=status,
                code=code,
                payload=payload,
                context=ctx,
            )
        raise ApiClientError(
            message,
            status=status,
            code=code,
            payload=payload,
            context=ctx,
        )

    @staticmethod
    def _session_cookie(resp: requests.Response) -> Optional[str]:
        cookies = getattr(resp, "cookies", None)
        if not cookies:
            return None
        value = cookies.get(SESSION_COOKIE)
        return str(value) if value else None


__all__ = ["AUTHENTICATE_PATH", "AuthRpcAdapter", "build_call_payload", "normalize_base_url"]
