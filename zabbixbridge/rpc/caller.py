"""JSON-RPC caller: envelope building, one blocking exchange, error classification."""

from __future__ import annotations

import itertools
import threading
from typing import Any, Callable

from loguru import logger

from zabbixbridge.rpc.protocol import RpcRequest, RpcResponse
from zabbixbridge.rpc.serialization import decode_response_body, encode_request, to_protocol_error
from zabbixbridge.rpc.transport import Transport, is_retryable_status
from zabbixbridge.utils.exceptions import TransportFailure, sanitize_error_message

LogSink = Callable[[str], None]

CONTENT_TYPE = "application/json-rpc"

# Correlation ids are unique for the process lifetime, across all callers.
_id_lock = threading.Lock()
_ids = itertools.count(1)


def next_request_id() -> int:
    with _id_lock:
        return next(_ids)


class RpcCaller:
    """
    Executes Zabbix API calls over a Transport.

    `auth_token` and `auth_in_header` are written by the Session; every call
    reads them. With `serialize=True` the full build/send/receive/decode cycle
    runs under one lock for servers that cannot take interleaved calls.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        serialize: bool = False,
        log_sink: LogSink | None = None,
    ):
        self.transport = transport
        self.serialize = serialize
        self.auth_token = ""
        self.auth_in_header = False
        self._log_sink = log_sink
        self._serial_lock = threading.Lock()

    def _trace(self, line: str) -> None:
        line = sanitize_error_message(line)
        if self._log_sink is not None:
            self._log_sink(line)
        else:
            logger.debug(line)

    def request(self, method: str, params: Any = None, *, authenticated: bool = True) -> RpcResponse:
        """Perform one call and return the decoded envelope, protocol errors included."""
        if self.serialize:
            with self._serial_lock:
                return self._exchange(method, params, authenticated)
        return self._exchange(method, params, authenticated)

    def call(self, method: str, params: Any = None, *, authenticated: bool = True) -> Any:
        """Perform one call and return its result; raise ProtocolError on a server error."""
        response = self.request(method, params, authenticated=authenticated)
        if response.error is not None:
            raise to_protocol_error(response, method=method)
        return response.result

    def _exchange(self, method: str, params: Any, authenticated: bool) -> RpcResponse:
        req_id = next_request_id()
        token = self.auth_token if authenticated else ""
        headers = {"Content-Type": CONTENT_TYPE}
        envelope_auth = token
        if token and self.auth_in_header:
            headers["Authorization"] = f"Bearer {token}"
            envelope_auth = ""
        frame = RpcRequest(
            id=req_id,
            method=method,
            params=params if params is not None else {},
            auth=envelope_auth,
        )
        body = encode_request(frame)
        self._trace(f"Request (POST): {body.decode('utf-8')}")

        try:
            resp = self.transport.post(body, headers)
        except TransportFailure as exc:
            self._trace(f"Error   : {exc}")
            raise

        self._trace(f"Response ({resp.status_code}): {resp.body.decode('utf-8', errors='replace')}")
        if resp.status_code >= 400:
            raise TransportFailure(
                f"transport http error {resp.status_code}: {method}",
                code="TRANSPORT_HTTP_ERROR",
                status_code=resp.status_code,
                retryable=is_retryable_status(resp.status_code),
            )
        return decode_response_body(resp.body, fallback_id=req_id)
