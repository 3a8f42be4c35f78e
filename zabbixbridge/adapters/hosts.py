"""Host adapters: proxy_hostid (6.x) vs proxyid + monitored_by (7.x)."""

from __future__ import annotations

from typing import Any

from zabbixbridge.adapters.base import ResourceAdapter
from zabbixbridge.models.fields import REPR_LEGACY, REPR_MODERN, ProxyAssignment


def _caller_assignment(payload: dict[str, Any], prefer: str) -> ProxyAssignment | None:
    modern = payload.get("proxyid")
    legacy = payload.get("proxy_hostid")
    if modern is not None and (prefer == REPR_MODERN or legacy is None):
        return ProxyAssignment.from_modern(modern, payload.get("monitored_by"))
    if legacy is not None:
        return ProxyAssignment(legacy, payload.get("monitored_by"), REPR_LEGACY)
    return None


class ProxyHostIdAdapter(ResourceAdapter):
    """6.x: the proxy is referenced as proxy_hostid and monitored_by does not exist."""

    def normalize_outbound(self, payload: dict[str, Any]) -> None:
        assignment = _caller_assignment(payload, REPR_LEGACY)
        payload.pop("proxyid", None)
        payload.pop("monitored_by", None)
        if assignment is not None:
            payload.update(assignment.to_legacy())

    def from_wire(self, raw: dict[str, Any]) -> dict[str, Any]:
        return populate_proxy_fields(dict(raw))


class ProxyIdAdapter(ResourceAdapter):
    """
    7.x: the proxy is referenced as proxyid and monitored_by is mandatory next to it.

    A missing monitored_by defaults to proxy (1) when a proxy is referenced and to
    server (0) when the reference is empty or "0".
    """

    def normalize_outbound(self, payload: dict[str, Any]) -> None:
        assignment = _caller_assignment(payload, REPR_MODERN)
        if assignment is None:
            return
        payload.pop("proxy_hostid", None)
        payload.update(assignment.to_modern())

    def from_wire(self, raw: dict[str, Any]) -> dict[str, Any]:
        return populate_proxy_fields(dict(raw))


def populate_proxy_fields(row: dict[str, Any]) -> dict[str, Any]:
    """Fill both namings from whichever one the server sent."""
    if row.get("proxyid") is not None:
        assignment = ProxyAssignment.from_modern(row["proxyid"], row.get("monitored_by"))
    elif row.get("proxy_hostid") is not None:
        assignment = ProxyAssignment.from_legacy(row["proxy_hostid"])
    else:
        return row
    row.update(assignment.to_legacy())
    row.update(assignment.to_modern())
    return row
