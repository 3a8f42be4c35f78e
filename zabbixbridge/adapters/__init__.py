"""Per-resource wire-shape adapters."""

from .base import PassthroughAdapter, ResourceAdapter, ResourceType, extract_ids
from .hosts import ProxyHostIdAdapter, ProxyIdAdapter, populate_proxy_fields
from .items import ListItemAdapter, MapItemAdapter
from .selection import ADAPTER_FAMILIES, select_adapter

__all__ = [
    "ADAPTER_FAMILIES",
    "ListItemAdapter",
    "MapItemAdapter",
    "PassthroughAdapter",
    "ProxyHostIdAdapter",
    "ProxyIdAdapter",
    "ResourceAdapter",
    "ResourceType",
    "extract_ids",
    "populate_proxy_fields",
    "select_adapter",
]
