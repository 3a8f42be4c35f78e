import json
import threading
import time

import pytest

from zabbixbridge.rpc.caller import RpcCaller, next_request_id
from zabbixbridge.rpc.serialization import decode_response_body, encode_request
from zabbixbridge.rpc.protocol import RpcRequest
from zabbixbridge.rpc.transport import TransportResponse
from zabbixbridge.utils.exceptions import ProtocolError, TransportFailure

TOKEN = "0424bd59b807674191e7d77572075f33"


def test_request_ids_increase_across_callers(stub) -> None:
    stub.reply("apiinfo.version", "7.0.0")
    first = RpcCaller(stub)
    second = RpcCaller(stub)

    first.call("apiinfo.version", [], authenticated=False)
    second.call("apiinfo.version", [], authenticated=False)
    first.call("apiinfo.version", [], authenticated=False)

    ids = [r["id"] for r in stub.requests]
    assert ids == sorted(ids)
    assert len(set(ids)) == 3
    assert next_request_id() > ids[-1]


def test_envelope_carries_method_params_and_token(stub) -> None:
    stub.reply("host.get", [])
    caller = RpcCaller(stub)
    caller.auth_token = TOKEN

    assert caller.call("host.get", {"output": "extend"}) == []

    frame = stub.last()
    assert frame["jsonrpc"] == "2.0"
    assert frame["method"] == "host.get"
    assert frame["params"] == {"output": "extend"}
    assert frame["auth"] == TOKEN
    assert stub.headers[-1]["Content-Type"] == "application/json-rpc"
    assert "Authorization" not in stub.headers[-1]


def test_unauthenticated_call_never_attaches_token(stub) -> None:
    stub.reply("apiinfo.version", "6.4.0")
    caller = RpcCaller(stub)
    caller.auth_token = TOKEN
    caller.auth_in_header = True

    caller.call("apiinfo.version", [], authenticated=False)

    assert "auth" not in stub.last()
    assert "Authorization" not in stub.headers[-1]


def test_bearer_header_replaces_auth_member(stub) -> None:
    stub.reply("item.get", [])
    caller = RpcCaller(stub)
    caller.auth_token = TOKEN
    caller.auth_in_header = True

    caller.call("item.get", {})

    assert "auth" not in stub.last()
    assert stub.headers[-1]["Authorization"] == f"Bearer {TOKEN}"


def test_missing_params_are_sent_as_empty_object(stub) -> None:
    stub.reply("hostgroup.get", [])
    RpcCaller(stub).call("hostgroup.get")
    assert stub.last()["params"] == {}


def test_invalid_method_is_protocol_error_not_transport_failure(stub) -> None:
    caller = RpcCaller(stub)
    with pytest.raises(ProtocolError) as err:
        caller.call("nosuch.method", {})
    assert not isinstance(err.value, TransportFailure)
    assert err.value.rpc_code == -32601
    assert err.value.rpc_message == "Method not found."
    assert err.value.rpc_data == 'Incorrect API "nosuch.method".'
    assert err.value.method == "nosuch.method"


def test_request_returns_error_envelope_without_raising(stub) -> None:
    stub.fail("item.create", -32602, "Invalid params.", "Item with key already exists.")
    response = RpcCaller(stub).request("item.create", [{}])
    assert not response.ok
    assert response.error.code == -32602
    assert response.error.data == "Item with key already exists."


def test_unreachable_endpoint_is_transport_failure() -> None:
    class DownTransport:
        def post(self, body, headers):
            raise TransportFailure("transport network error", code="TRANSPORT_NETWORK_ERROR", retryable=True)

    with pytest.raises(TransportFailure) as err:
        RpcCaller(DownTransport()).call("apiinfo.version", [], authenticated=False)
    assert not isinstance(err.value, ProtocolError)
    assert err.value.retryable is True


@pytest.mark.parametrize("status,retryable", [(500, True), (429, True), (403, False)])
def test_http_error_status_is_transport_failure(stub, status: int, retryable: bool) -> None:
    stub.raw("host.get", status, b"<html>nope</html>")
    with pytest.raises(TransportFailure) as err:
        RpcCaller(stub).call("host.get", {})
    assert err.value.code == "TRANSPORT_HTTP_ERROR"
    assert err.value.status_code == status
    assert err.value.retryable is retryable


def test_non_json_body_is_bad_response(stub) -> None:
    stub.raw("host.get", 200, b"<html>maintenance</html>")
    with pytest.raises(TransportFailure) as err:
        RpcCaller(stub).call("host.get", {})
    assert err.value.code == "TRANSPORT_BAD_RESPONSE"
    assert err.value.retryable is False


def test_envelope_without_result_or_error_is_bad_response() -> None:
    with pytest.raises(TransportFailure) as err:
        decode_response_body(b'{"jsonrpc": "2.0", "id": 3}', fallback_id=3)
    assert err.value.code == "TRANSPORT_BAD_RESPONSE"


def test_error_member_wins_over_result() -> None:
    body = json.dumps(
        {"jsonrpc": "2.0", "result": [], "error": {"code": -32500, "message": "Application error.", "data": "x"}, "id": 1}
    ).encode()
    response = decode_response_body(body)
    assert response.error is not None
    assert response.result is None


def test_encode_request_omits_empty_auth() -> None:
    frame = json.loads(encode_request(RpcRequest(id=7, method="user.login", params={"username": "Admin"})))
    assert frame == {"jsonrpc": "2.0", "method": "user.login", "params": {"username": "Admin"}, "id": 7}


def test_log_sink_receives_redacted_trace_lines(stub) -> None:
    stub.reply("user.login", TOKEN)
    lines: list[str] = []
    caller = RpcCaller(stub, log_sink=lines.append)

    caller.call("user.login", {"username": "Admin", "password": "s3cret"}, authenticated=False)

    assert len(lines) == 2
    assert lines[0].startswith("Request (POST): ")
    assert lines[1].startswith("Response (200): ")
    joined = "\n".join(lines)
    assert "s3cret" not in joined
    assert TOKEN not in joined
    assert "[REDACTED]" in joined


def test_serialize_mode_runs_one_exchange_at_a_time() -> None:
    state = {"inflight": 0, "peak": 0}
    guard = threading.Lock()

    class SlowTransport:
        def post(self, body, headers):
            with guard:
                state["inflight"] += 1
                state["peak"] = max(state["peak"], state["inflight"])
            time.sleep(0.01)
            with guard:
                state["inflight"] -= 1
            frame = json.loads(body)
            return TransportResponse(200, json.dumps({"jsonrpc": "2.0", "result": [], "id": frame["id"]}).encode())

    caller = RpcCaller(SlowTransport(), serialize=True)
    threads = [threading.Thread(target=caller.call, args=("host.get", {})) for _ in range(6)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert state["peak"] == 1
