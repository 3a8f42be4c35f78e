"""Item and item prototype adapters: object-shaped (6.x) vs array-shaped (7.x) pair fields."""

from __future__ import annotations

from typing import Any

from zabbixbridge.adapters.base import ResourceAdapter
from zabbixbridge.models.fields import REPR_LIST, REPR_MAP, PairCollection

PAIR_FIELDS = ("headers", "query_fields")


def _caller_collection(payload: dict[str, Any], field: str, prefer: str) -> PairCollection | None:
    map_key, list_key = f"{field}_map", f"{field}_list"
    candidates = [
        (map_key, PairCollection.from_map),
        (list_key, PairCollection.from_list),
    ]
    if prefer == REPR_LIST:
        candidates.reverse()
    for key, build in candidates:
        value = payload.get(key)
        if value is not None:
            return build(value, field=key)
    if payload.get(field) is not None:
        return PairCollection.from_wire(payload[field], field=field)
    return None


class _PairFieldItemAdapter(ResourceAdapter):
    native = REPR_MAP

    def normalize_outbound(self, payload: dict[str, Any]) -> None:
        for field in PAIR_FIELDS:
            collection = _caller_collection(payload, field, self.native)
            payload.pop(field, None)
            payload.pop(f"{field}_map", None)
            payload.pop(f"{field}_list", None)
            if collection is None:
                continue
            if self.native == REPR_LIST:
                payload[f"{field}_list"] = collection.to_list()
            else:
                payload[f"{field}_map"] = collection.to_map()

    def to_wire(self, payload: dict[str, Any]) -> dict[str, Any]:
        wire = dict(payload)
        for field in PAIR_FIELDS:
            native_value = wire.pop(f"{field}_{self.native}", None)
            wire.pop(f"{field}_map", None)
            wire.pop(f"{field}_list", None)
            if native_value is not None:
                wire[field] = native_value
        return wire

    def from_wire(self, raw: dict[str, Any]) -> dict[str, Any]:
        row = dict(raw)
        for field in PAIR_FIELDS:
            if field not in row:
                continue
            collection = PairCollection.from_wire(row.pop(field), field=field)
            row[f"{field}_map"] = collection.to_map()
            row[f"{field}_list"] = collection.to_list()
        return row


class MapItemAdapter(_PairFieldItemAdapter):
    """Sends headers/query_fields as JSON objects (6.x)."""

    native = REPR_MAP


class ListItemAdapter(_PairFieldItemAdapter):
    """Sends headers/query_fields as arrays of {name, value} (7.x)."""

    native = REPR_LIST
