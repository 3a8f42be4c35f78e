"""Adapter base: generic CRUD over the caller with outbound/inbound shape hooks."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from zabbixbridge.rpc.caller import RpcCaller
from zabbixbridge.utils.exceptions import DecodeError


@dataclass(slots=True, frozen=True)
class ResourceType:
    """Static description of one API object family (item, host, mfa, ...)."""

    name: str
    id_field: str
    ids_key: str
    get_ids_param: str
    feature: str | None = None
    read_only: bool = False
    # itemprototype.delete answers with "prototypeids" rather than "itemids".
    delete_ids_key: str | None = None

    def method(self, verb: str) -> str:
        return f"{self.name}.{verb}"


def extract_ids(result: Any, ids_key: str) -> list[str]:
    """Pull ``{"itemids": [...]}`` (or the id-keyed object variant) out of a result."""
    if not isinstance(result, dict) or ids_key not in result:
        raise DecodeError(ids_key, result, f"result has no '{ids_key}' member")
    ids = result[ids_key]
    if isinstance(ids, dict):
        ids = list(ids.values())
    if not isinstance(ids, list):
        raise DecodeError(ids_key, ids, "expected a list of ids")
    return [str(x) for x in ids]


class ResourceAdapter:
    """
    Single-shape adapter; subclasses override the three shape hooks.

    - ``normalize_outbound`` rewrites the caller's payload in place so only the
      representation this adapter sends is populated.
    - ``to_wire`` builds the dict that actually goes into ``params``.
    - ``from_wire`` turns one server row into the unified payload.
    """

    def __init__(self, resource: ResourceType, caller: RpcCaller):
        self.resource = resource
        self.caller = caller

    def normalize_outbound(self, payload: dict[str, Any]) -> None:
        return None

    def to_wire(self, payload: dict[str, Any]) -> dict[str, Any]:
        return dict(payload)

    def from_wire(self, raw: dict[str, Any]) -> dict[str, Any]:
        return dict(raw)

    def prepare(self, payload: dict[str, Any]) -> dict[str, Any]:
        self.normalize_outbound(payload)
        return self.to_wire(payload)

    def get(self, params: dict[str, Any]) -> list[dict[str, Any]]:
        result = self.caller.call(self.resource.method("get"), params)
        if not isinstance(result, list):
            raise DecodeError("result", result, f"{self.resource.method('get')} must return an array")
        rows: list[dict[str, Any]] = []
        for row in result:
            if not isinstance(row, dict):
                raise DecodeError("result", row, "expected object rows")
            rows.append(self.from_wire(row))
        return rows

    def create(self, payloads: list[dict[str, Any]]) -> list[str]:
        wire = [self.prepare(p) for p in payloads]
        result = self.caller.call(self.resource.method("create"), wire)
        return extract_ids(result, self.resource.ids_key)

    def update(self, payloads: list[dict[str, Any]]) -> list[str]:
        wire = [self.prepare(p) for p in payloads]
        result = self.caller.call(self.resource.method("update"), wire)
        return extract_ids(result, self.resource.ids_key)

    def delete_by_ids(self, ids: Iterable[str]) -> list[str]:
        result = self.caller.call(self.resource.method("delete"), [str(x) for x in ids])
        return extract_ids(result, self.resource.delete_ids_key or self.resource.ids_key)


class PassthroughAdapter(ResourceAdapter):
    """Resources whose wire shape is the same on every supported server."""
