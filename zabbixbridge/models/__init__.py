"""Payload value types."""

from .fields import (
    MONITORED_BY_PROXY,
    MONITORED_BY_PROXY_GROUP,
    MONITORED_BY_SERVER,
    NamedValue,
    PairCollection,
    ProxyAssignment,
    default_monitored_by,
    pairs_list_to_map,
    pairs_map_to_list,
)
from .validation import (
    ITEM_TYPE_BROWSER,
    is_browser_item,
    validate_browser_item,
    validate_host_for_version,
    validate_item_for_version,
)

__all__ = [
    "MONITORED_BY_PROXY",
    "MONITORED_BY_PROXY_GROUP",
    "MONITORED_BY_SERVER",
    "NamedValue",
    "PairCollection",
    "ProxyAssignment",
    "default_monitored_by",
    "pairs_list_to_map",
    "pairs_map_to_list",
    "ITEM_TYPE_BROWSER",
    "is_browser_item",
    "validate_browser_item",
    "validate_host_for_version",
    "validate_item_for_version",
]
