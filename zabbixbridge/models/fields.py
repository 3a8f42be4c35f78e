"""
Value types for fields with two wire representations.

PairCollection
    A list of name/value pairs that 6.x sends as a JSON object (``{"Accept": "text/html"}``)
    and 7.x as a JSON array (``[{"name": "Accept", "value": "text/html"}]``).

ProxyAssignment
    The proxy reference of a host: ``proxy_hostid`` in 6.x; ``proxyid`` plus the
    mandatory ``monitored_by`` companion in 7.x.

Both remember which representation they were built from (``authoritative``) and
convert to either one without loss for values both shapes can express.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from loguru import logger

from zabbixbridge.utils.exceptions import DecodeError

REPR_MAP = "map"
REPR_LIST = "list"
REPR_LEGACY = "legacy"
REPR_MODERN = "modern"

MONITORED_BY_SERVER = 0
MONITORED_BY_PROXY = 1
MONITORED_BY_PROXY_GROUP = 2


@dataclass(slots=True, frozen=True)
class NamedValue:
    name: str
    value: Any

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "value": self.value}


@dataclass(slots=True, frozen=True)
class PairCollection:
    """Ordered name/value pairs with a record of the representation they came from."""

    pairs: tuple[NamedValue, ...]
    authoritative: str

    @classmethod
    def from_map(cls, mapping: Mapping[str, Any], *, field: str = "pairs") -> PairCollection:
        if not isinstance(mapping, Mapping):
            raise DecodeError(field, mapping, "expected an object")
        pairs = []
        for name, value in mapping.items():
            if not isinstance(name, str):
                raise DecodeError(field, mapping, "object keys must be strings")
            pairs.append(NamedValue(name, value))
        return cls(tuple(pairs), REPR_MAP)

    @classmethod
    def from_list(cls, rows: Sequence[Any], *, field: str = "pairs") -> PairCollection:
        if isinstance(rows, (str, bytes)) or not isinstance(rows, Sequence):
            raise DecodeError(field, rows, "expected an array")
        pairs = []
        for row in rows:
            if not isinstance(row, Mapping) or "name" not in row or "value" not in row:
                raise DecodeError(field, row, "array entries must be {name, value} objects")
            pairs.append(NamedValue(str(row["name"]), row["value"]))
        return cls(tuple(pairs), REPR_LIST)

    @classmethod
    def from_wire(cls, value: Any, *, field: str = "pairs") -> PairCollection:
        """Sniff which shape the server used and decode it."""
        if isinstance(value, Mapping):
            return cls.from_map(value, field=field)
        if isinstance(value, (list, tuple)):
            return cls.from_list(value, field=field)
        if isinstance(value, str):
            text = value.strip()
            if not text:
                return cls((), REPR_MAP)
            if text[0] not in "{[":
                raise DecodeError(field, value, "neither object nor array")
            try:
                decoded = json.loads(text)
            except json.JSONDecodeError as exc:
                raise DecodeError(field, value, str(exc)) from exc
            return cls.from_wire(decoded, field=field)
        raise DecodeError(field, value, "neither object nor array")

    @property
    def has_duplicate_names(self) -> bool:
        names = [pair.name for pair in self.pairs]
        return len(names) != len(set(names))

    def to_map(self) -> dict[str, Any]:
        """Object form. Duplicate names collapse to the last value."""
        if self.has_duplicate_names:
            logger.warning("Duplicate names collapsed while converting pairs to object form")
        return {pair.name: pair.value for pair in self.pairs}

    def to_list(self) -> list[dict[str, Any]]:
        return [pair.to_dict() for pair in self.pairs]


def pairs_map_to_list(mapping: Mapping[str, Any]) -> list[dict[str, Any]]:
    return PairCollection.from_map(mapping).to_list()


def pairs_list_to_map(rows: Sequence[Mapping[str, Any]]) -> dict[str, Any]:
    return PairCollection.from_list(rows).to_map()


def default_monitored_by(proxy_id: Any) -> int:
    """Companion value 7.x requires next to proxyid when the caller gave none."""
    if proxy_id is None or str(proxy_id) in ("", "0"):
        return MONITORED_BY_SERVER
    return MONITORED_BY_PROXY


@dataclass(slots=True, frozen=True)
class ProxyAssignment:
    """Proxy reference of a host in either naming."""

    proxy_id: Any
    monitored_by: Any
    authoritative: str

    @classmethod
    def from_legacy(cls, proxy_hostid: Any) -> ProxyAssignment:
        return cls(proxy_hostid, None, REPR_LEGACY)

    @classmethod
    def from_modern(cls, proxyid: Any, monitored_by: Any = None) -> ProxyAssignment:
        return cls(proxyid, monitored_by, REPR_MODERN)

    @property
    def resolved_monitored_by(self) -> Any:
        if self.monitored_by is not None:
            return self.monitored_by
        return default_monitored_by(self.proxy_id)

    def to_legacy(self) -> dict[str, Any]:
        return {"proxy_hostid": self.proxy_id}

    def to_modern(self) -> dict[str, Any]:
        return {"proxyid": self.proxy_id, "monitored_by": self.resolved_monitored_by}
