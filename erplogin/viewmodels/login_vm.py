"""View-model for the login screen.

The view binds its inputs to ``login``/``password``/``database`` and shows a
spinner instead of the submit control while ``in_progress`` is true.
``submit`` returns a :class:`LoginOutcome` which the view turns into a
navigation or a notification. Errors never propagate out of ``submit``.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from ..domain.errors import LoginErrorKind
from ..domain.login_state import LoginOutcome, LoginPhase
from ..domain.ports import UseCaseError
from ..domain.session import Credentials, Session
from .settings_vm import DEFAULT_POST_LOGIN_PATH

UNEXPECTED_ERROR_MESSAGE = "Unexpected error."


class LoginVM:
    """Holds login form state and the idle/in-progress phase."""

    def __init__(
        self,
        *,
        authenticate: Callable[[Credentials], Session],
        database: str = "",
        destination: str = DEFAULT_POST_LOGIN_PATH,
    ) -> None:
        self._log = logging.getLogger(__name__)
        self._authenticate = authenticate
        self.destination = destination

        self.database: str = database
        self.login: str = ""
        self.password: str = ""
        self.phase: LoginPhase = LoginPhase.IDLE
        self.last_error: str = ""
        self.last_outcome: Optional[LoginOutcome] = None

    @property
    def in_progress(self) -> bool:
        return self.phase is LoginPhase.IN_PROGRESS

    @property
    def session(self) -> Optional[Session]:
        if self.last_outcome is None:
            return None
        return self.last_outcome.session

    def can_submit(self) -> bool:
        if self.in_progress:
            return False
        return bool(self.login.strip() and self.password and self.database.strip())

    def credentials(self) -> Credentials:
        return Credentials(
            database=self.database.strip(),
            login=self.login.strip(),
            password=self.password,
        )

    def submit(self) -> LoginOutcome:
        """Run one login attempt and return its outcome.

        ``phase`` is ``IN_PROGRESS`` for exactly the duration of the use-case
        call and back to ``IDLE`` on every exit path.
        """
        credentials = self.credentials()
        self.phase = LoginPhase.IN_PROGRESS
        try:
            session = self._authenticate(credentials)
        except UseCaseError as err:
            outcome = LoginOutcome.failure(err.message or str(err), err.kind)
        except Exception:
            self._log.exception("Unexpected failure during login for %r", credentials.login)
            outcome = LoginOutcome.failure(UNEXPECTED_ERROR_MESSAGE, LoginErrorKind.TRANSPORT)
        else:
            outcome = LoginOutcome.success(session, self.destination)
        finally:
            self.phase = LoginPhase.IDLE

        self.last_outcome = outcome
        if outcome.ok:
            self.last_error = ""
            self.password = ""
        else:
            self.last_error = outcome.error or ""
        return outcome

    def reset(self) -> None:
        """Forget the last outcome (e.g. after logging out of the UI)."""
        self.password = ""
        self.last_error = ""
        self.last_outcome = None
