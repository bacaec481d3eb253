"""Use case for authenticating one login against the business server."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from erplogin.adapters.api_errors import INVALID_RESPONSE_MESSAGE
from erplogin.domain.errors import LoginErrorKind
from erplogin.domain.ports import AuthPort, UseCaseError
from erplogin.domain.session import Credentials, Session
from erplogin.usecases.error_mapping import map_api_error

_log = logging.getLogger(__name__)


@dataclass
class Authenticate:
    """Use-case callable returning a :class:`Session` or raising ``UseCaseError``."""

    auth_port: AuthPort

    def __call__(self, credentials: Credentials) -> Session:
        _log.info("Login requested for %r on database %r", credentials.login, credentials.database)
        try:
            reply = self.auth_port.authenticate(credentials)
        except Exception as exc:
            mapped = map_api_error(
                exc,
                default_code="LOGIN_FAILED",
                default_message="Login failed.",
            )
            _log.warning("Login failed for %r: %s (%s)", credentials.login, mapped.message, mapped.code)
            raise mapped from exc

        try:
            session = Session.from_payload(
                reply.result,
                cookie_session_id=reply.session_cookie,
            )
        except ValueError as exc:
            _log.warning("Login response for %r rejected: %s", credentials.login, exc)
            raise UseCaseError(
                "SERVER_ERROR",
                INVALID_RESPONSE_MESSAGE,
                kind=LoginErrorKind.SERVER,
            ) from exc

        _log.info("Login succeeded for %r (uid=%s)", credentials.login, session.uid)
        return session


__all__ = ["Authenticate"]
