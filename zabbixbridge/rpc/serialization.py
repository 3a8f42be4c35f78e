"""Serialization helpers for JSON-RPC envelopes."""

from __future__ import annotations

import json
from typing import Any

from zabbixbridge.rpc.protocol import RpcError, RpcRequest, RpcResponse
from zabbixbridge.utils.exceptions import ProtocolError, TransportFailure


def safe_dict(value: Any) -> dict[str, Any]:
    """Return the value when dict-like, otherwise an empty dict."""
    return value if isinstance(value, dict) else {}


def encode_request(request: RpcRequest) -> bytes:
    """Encode a request envelope as UTF-8 JSON."""
    payload: dict[str, Any] = {
        "jsonrpc": request.jsonrpc,
        "method": request.method,
        "params": request.params,
        "id": request.id,
    }
    if request.auth:
        payload["auth"] = request.auth
    return json.dumps(payload, ensure_ascii=False).encode("utf-8")


def normalize_rpc_error(error: Any) -> RpcError:
    """Normalize an error member into RpcError."""
    row = safe_dict(error)
    try:
        code = int(row.get("code") or 0)
    except (TypeError, ValueError):
        code = 0
    data = row.get("data")
    return RpcError(
        code=code,
        message=str(row.get("message") or "rpc failed"),
        data=data if isinstance(data, str) else ("" if data is None else json.dumps(data)),
    )


def decode_response_payload(payload: Any, *, fallback_id: int | None = None) -> RpcResponse:
    """Decode a parsed JSON body into RpcResponse."""
    if not isinstance(payload, dict):
        raise TransportFailure(
            f"bad response: expected JSON object envelope, got {type(payload).__name__}",
            code="TRANSPORT_BAD_RESPONSE",
        )
    if "error" not in payload and "result" not in payload:
        raise TransportFailure(
            "bad response: envelope has neither result nor error",
            code="TRANSPORT_BAD_RESPONSE",
        )
    resp_id = payload.get("id", fallback_id)
    jsonrpc = str(payload.get("jsonrpc") or "2.0")
    error = payload.get("error")
    if error is not None:
        return RpcResponse(id=resp_id, error=normalize_rpc_error(error), jsonrpc=jsonrpc)
    return RpcResponse(id=resp_id, result=payload.get("result"), jsonrpc=jsonrpc)


def decode_response_body(body: bytes, *, fallback_id: int | None = None) -> RpcResponse:
    """Parse raw response bytes; a non-JSON body is a transport failure."""
    try:
        payload = json.loads(body.decode("utf-8") if isinstance(body, (bytes, bytearray)) else body)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise TransportFailure(
            "bad response: non-json body",
            code="TRANSPORT_BAD_RESPONSE",
        ) from exc
    return decode_response_payload(payload, fallback_id=fallback_id)


def to_protocol_error(response: RpcResponse, *, method: str) -> ProtocolError:
    """Convert an error response to ProtocolError."""
    err = response.error or RpcError(code=0, message=f"{method} failed")
    return ProtocolError(err.code, err.message, err.data, method=method)
