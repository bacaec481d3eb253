from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence

import pytest

from erplogin.adapters.api_errors import (
    INVALID_RESPONSE_MESSAGE,
    NULL_UID_MESSAGE,
    ApiClientError,
    ApiServerError,
    AuthenticationError,
    RpcError,
)
from erplogin.adapters.auth_rpc import AuthRpcAdapter, build_call_payload
from erplogin.domain.errors import LoginErrorKind
from erplogin.domain.session import Credentials

CREDS = Credentials(database="demo", login="admin", password="admin")


class _ResponseStub:
    def __init__(
        self,
        payload: Any,
        status_code: int = 200,
        *,
        cookies: Optional[Dict[str, str]] = None,
        raw_text: Optional[str] = None,
    ) -> None:
        self._payload = payload
        self.status_code = status_code
        self.cookies = dict(cookies or {})
        self.text = raw_text if raw_text is not None else json.dumps(payload)

    def json(self) -> Any:
        if self._payload is _NOT_JSON:
            raise ValueError("not json")
        return self._payload


_NOT_JSON = object()


class _SessionStub:
    def __init__(self, responses: Sequence[_ResponseStub]) -> None:
        self._responses = list(responses)
        self.calls: List[Dict[str, Any]] = []

    def post(self, url: str, *, json_body: Dict[str, Any], timeout: Optional[float] = None) -> _ResponseStub:
        self.calls.append({"url": url, "json_body": json_body, "timeout": timeout})
        if not self._responses:
            raise RuntimeError("No stub response configured")
        return self._responses.pop(0)


def _adapter_with(*responses: _ResponseStub) -> tuple[AuthRpcAdapter, _SessionStub]:
    adapter = AuthRpcAdapter("https://erp.example.com/")
    stub = _SessionStub(responses)
    adapter.session = stub  # type: ignore[assignment]
    return adapter, stub


def test_authenticate_posts_jsonrpc_call_to_session_endpoint() -> None:
    adapter, stub = _adapter_with(_ResponseStub({"jsonrpc": "2.0", "result": {"uid": 2, "session_id": "abc"}}))

    adapter.authenticate(CREDS)

    call = stub.calls[0]
    assert call["url"] == "https://erp.example.com/web/session/authenticate"
    body = call["json_body"]
    assert body["jsonrpc"] == "2.0"
    assert body["method"] == "call"
    assert body["params"] == {"db": "demo", "login": "admin", "password": "admin"}


def test_authenticate_returns_result_object_unchanged() -> None:
    result = {"uid": 2, "session_id": "abc", "user_context": {"lang": "en_US"}}
    adapter, _ = _adapter_with(_ResponseStub({"jsonrpc": "2.0", "id": 1, "result": result}))

    reply = adapter.authenticate(CREDS)

    assert reply.result == {"uid": 2, "session_id": "abc", "user_context": {"lang": "en_US"}}


def test_authenticate_records_session_cookie() -> None:
    adapter, _ = _adapter_with(
        _ResponseStub({"result": {"uid": 7}}, cookies={"session_id": "cookie-sid"})
    )

    reply = adapter.authenticate(CREDS)

    assert reply.session_cookie == "cookie-sid"


def test_authenticate_without_cookie_reports_none() -> None:
    adapter, _ = _adapter_with(_ResponseStub({"result": {"uid": 7, "session_id": "abc"}}))

    assert adapter.authenticate(CREDS).session_cookie is None


def test_authenticate_null_uid_is_authentication_failure() -> None:
    adapter, _ = _adapter_with(_ResponseStub({"result": {"uid": None, "session_id": "abc"}}))

    with pytest.raises(AuthenticationError) as info:
        adapter.authenticate(CREDS)

    assert str(info.value) == NULL_UID_MESSAGE == "User ID is null. Login failed."
    assert info.value.kind is LoginErrorKind.AUTHENTICATION


def test_authenticate_missing_uid_is_authentication_failure() -> None:
    adapter, _ = _adapter_with(_ResponseStub({"result": {"session_id": "abc"}}))

    with pytest.raises(AuthenticationError):
        adapter.authenticate(CREDS)


def test_authenticate_false_uid_is_authentication_failure() -> None:
    adapter, _ = _adapter_with(_ResponseStub({"result": {"uid": False}}))

    with pytest.raises(AuthenticationError) as info:
        adapter.authenticate(CREDS)

    assert info.value.message == NULL_UID_MESSAGE


def test_authenticate_accepts_uid_zero() -> None:
    adapter, _ = _adapter_with(_ResponseStub({"result": {"uid": 0}}))

    assert adapter.authenticate(CREDS).result == {"uid": 0}


def test_authenticate_error_member_with_http_200() -> None:
    adapter, _ = _adapter_with(_ResponseStub({"error": {"code": 200, "message": "Invalid credentials"}}))

    with pytest.raises(RpcError) as info:
        adapter.authenticate(CREDS)

    assert info.value.message == "Invalid credentials"
    assert info.value.code == "200"
    assert info.value.kind is LoginErrorKind.SERVER


def test_authenticate_error_data_message_used_when_message_missing() -> None:
    payload = {"error": {"code": 200, "data": {"name": "odoo.exceptions.AccessDenied", "message": "Access Denied"}}}
    adapter, _ = _adapter_with(_ResponseStub(payload))

    with pytest.raises(RpcError) as info:
        adapter.authenticate(CREDS)

    assert info.value.message == "Access Denied"


def test_authenticate_without_result_uses_fallback_message() -> None:
    adapter, _ = _adapter_with(_ResponseStub({"jsonrpc": "2.0", "id": 1}))

    with pytest.raises(RpcError) as info:
        adapter.authenticate(CREDS)

    assert info.value.message == INVALID_RESPONSE_MESSAGE


def test_authenticate_non_json_body_uses_fallback_message() -> None:
    adapter, _ = _adapter_with(_ResponseStub(_NOT_JSON, raw_text="<html>maintenance</html>"))

    with pytest.raises(RpcError) as info:
        adapter.authenticate(CREDS)

    assert info.value.message == INVALID_RESPONSE_MESSAGE


def test_authenticate_server_error_status_uses_error_message() -> None:
    adapter, _ = _adapter_with(_ResponseStub({"error": {"message": "Database busy"}}, status_code=503))

    with pytest.raises(ApiServerError) as info:
        adapter.authenticate(CREDS)

    assert info.value.message == "Database busy"
    assert info.value.status == 503


def test_authenticate_client_error_status_without_body() -> None:
    adapter, _ = _adapter_with(_ResponseStub(_NOT_JSON, status_code=404, raw_text=""))

    with pytest.raises(ApiClientError) as info:
        adapter.authenticate(CREDS)

    assert info.value.message == INVALID_RESPONSE_MESSAGE
    assert info.value.status == 404


def test_authenticate_does_not_retry_on_failure() -> None:
    adapter, stub = _adapter_with(
        _ResponseStub({"error": {"message": "boom"}}, status_code=500),
        _ResponseStub({"result": {"uid": 2}}),
    )

    with pytest.raises(ApiServerError):
        adapter.authenticate(CREDS)

    assert len(stub.calls) == 1


def test_request_ids_increase_per_call() -> None:
    adapter, stub = _adapter_with(
        _ResponseStub({"result": {"uid": 2}}),
        _ResponseStub({"result": {"uid": 2}}),
    )

    adapter.authenticate(CREDS)
    adapter.authenticate(CREDS)

    assert [call["json_body"]["id"] for call in stub.calls] == [1, 2]


@pytest.mark.parametrize("url", ["", "erp.example.com", "ftp://erp.example.com", "https://", "https://erp?x=1"])
def test_adapter_rejects_invalid_base_url(url: str) -> None:
    with pytest.raises(ValueError):
        AuthRpcAdapter(url)


def test_build_call_payload_envelope() -> None:
    assert build_call_payload({"db": "x"}, 5) == {
        "jsonrpc": "2.0",
        "method": "call",
        "params": {"db": "x"},
        "id": 5,
    }
