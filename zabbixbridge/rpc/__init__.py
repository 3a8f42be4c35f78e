"""JSON-RPC envelope, transport and caller."""

from .caller import RpcCaller, next_request_id
from .protocol import RpcError, RpcRequest, RpcResponse
from .serialization import decode_response_body, decode_response_payload, encode_request, normalize_rpc_error, safe_dict
from .transport import HttpxTransport, Transport, TransportResponse

__all__ = [
    "RpcCaller",
    "next_request_id",
    "RpcError",
    "RpcRequest",
    "RpcResponse",
    "HttpxTransport",
    "Transport",
    "TransportResponse",
    "safe_dict",
    "encode_request",
    "decode_response_body",
    "decode_response_payload",
    "normalize_rpc_error",
]
