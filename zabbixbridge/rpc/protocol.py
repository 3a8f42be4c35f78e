"""JSON-RPC 2.0 envelope models for the Zabbix API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

JSONRPC_VERSION = "2.0"


@dataclass(slots=True)
class RpcError:
    """Error member of a response envelope."""

    code: int
    message: str
    data: str = ""


@dataclass(slots=True)
class RpcRequest:
    """Request envelope. `auth` is omitted from the wire when empty."""

    id: int
    method: str
    params: Any
    auth: str = ""
    jsonrpc: str = JSONRPC_VERSION


@dataclass(slots=True)
class RpcResponse:
    """Response envelope. A present `error` means failure regardless of `result`."""

    id: int | None
    result: Any = None
    error: RpcError | None = None
    jsonrpc: str = JSONRPC_VERSION

    @property
    def ok(self) -> bool:
        return self.error is None
