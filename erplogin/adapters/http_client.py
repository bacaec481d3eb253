"""Shared HTTP transport utilities for JSON-RPC adapters.

This module provides a thin wrapper around ``requests.Session`` so adapter
implementations share per-call sessions, timeout policy, header construction
and the mapping of ``requests`` exceptions onto typed transport errors.

Dependencies:
    - ``requests`` for network I/O.
    - ``erplogin.adapters.api_errors`` for typed transport failures.

Call context:
    - Constructed by ``erplogin/adapters/auth_rpc.py``.
    - Used only inside adapter layer methods; use cases interact through ports.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import requests
from requests import exceptions as req_exc

from erplogin.adapters.api_errors import ApiTimeoutError, ApiTransportError

_log = logging.getLogger(__name__)


@dataclass
class HttpConfig:
    """Timeout configuration for adapter HTTP calls.

    Attributes:
        request_timeout_s: Timeout in seconds for JSON-RPC calls, ``None``
            waits indefinitely.
    """
    request_timeout_s: Optional[float] = 30


class JsonSession:
    """``requests`` wrapper that posts JSON bodies exactly once.

    This class is transport-only. Callers provide endpoint URLs and decide how
    to map HTTP statuses and response bodies into adapter errors.
    """

    def __init__(
        self,
        cfg: HttpConfig,
        *,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ) -> None:
        """Create the wrapper.

        Args:
            cfg: Shared timeout settings.
            session_factory: Builds the ``requests.Session`` used for one
                request. Every ``post`` opens and closes its own session, so
                cookies and connections never outlive the call.
        """
        self.cfg = cfg
        self.session_factory = session_factory

    @staticmethod
    def _headers(accept: str = "application/json") -> Dict[str, str]:
        return {"Accept": accept, "Content-Type": "application/json"}

    def post(
        self,
        url: str,
        *,
        json_body: Dict[str, Any],
        timeout: Optional[float] = None,
    ) -> requests.Response:
        """Send a JSON POST request.

        Args:
            url: Absolute endpoint URL.
            json_body: Payload object serialized to JSON text.
            timeout: Optional timeout override in seconds.

        Returns:
            ``requests.Response`` regardless of HTTP status.

        Raises:
            ApiTimeoutError: If the server does not answer in time.
            ApiTransportError: On DNS, connection or other transport failures.
        """
        context = f"POST {url}"
        data = json.dumps(json_body)
        _log.debug("%s (%d bytes)", context, len(data))
        try:
            with self.session_factory() as session:
                return session.post(
                    url,
                    data=data,
                    headers=self._headers(),
                    timeout=timeout if timeout is not None else self.cfg.request_timeout_s,
                )
        except req_exc.Timeout as exc:
            raise ApiTimeoutError(f"Timeout contacting {url}", context=context) from exc
        except req_exc.ConnectionError as exc:
            raise ApiTransportError(f"Could not connect to {url}", context=context) from exc
        except req_exc.RequestException as exc:
            raise ApiTransportError(str(exc) or f"Request to {url} failed", context=context) from exc


__all__ = ["HttpConfig", "JsonSession"]
