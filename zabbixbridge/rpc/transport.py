"""Byte-level POST transport for the JSON-RPC caller."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

import httpx

from zabbixbridge.utils.exceptions import TransportFailure

DEFAULT_USER_AGENT = "zabbixbridge"


@dataclass(slots=True)
class TransportResponse:
    status_code: int
    body: bytes


class Transport(Protocol):
    """Anything that can POST a body and hand back status plus body."""

    def post(self, body: bytes, headers: dict[str, str]) -> TransportResponse: ...


class HttpxTransport:
    """
    Default transport over httpx.

    One short-lived httpx.Client per exchange; connection reuse is left to the
    caller's own Transport if they need it.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: float = 20.0,
        verify: bool = True,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        self.url = url
        self.timeout = timeout
        self.verify = verify
        self.user_agent = user_agent

    def post(self, body: bytes, headers: dict[str, str]) -> TransportResponse:
        merged = {"User-Agent": self.user_agent, **headers}
        try:
            with httpx.Client(timeout=self.timeout, verify=self.verify) as client:
                resp = client.request("POST", self.url, content=body, headers=merged)
        except httpx.TimeoutException as exc:
            raise TransportFailure(
                f"transport timeout: POST {self.url}",
                code="TRANSPORT_TIMEOUT",
                retryable=True,
            ) from exc
        except httpx.RequestError as exc:
            raise TransportFailure(
                f"transport network error: POST {self.url}: {exc}",
                code="TRANSPORT_NETWORK_ERROR",
                retryable=True,
            ) from exc
        return TransportResponse(
            status_code=int(getattr(resp, "status_code", 0) or 0),
            body=bytes(getattr(resp, "content", b"") or b""),
        )


def is_retryable_status(status_code: int) -> bool:
    return status_code >= 500 or status_code in {408, 425, 429}
