"""Version-aware checks for payloads built by hand."""

from __future__ import annotations

from typing import Any

from zabbixbridge.utils.exceptions import UnsupportedFeatureError, ValidationError
from zabbixbridge.versioning.features import FEATURE_BROWSER_ITEM, FEATURE_MONITORED_BY, compute_feature_map
from zabbixbridge.versioning.manager import parse_version

ITEM_TYPE_BROWSER = 22


def is_browser_item(item: dict[str, Any]) -> bool:
    return str(item.get("type", "")).strip() == str(ITEM_TYPE_BROWSER)


def validate_browser_item(item: dict[str, Any]) -> None:
    if not item.get("browser_script"):
        raise ValidationError("browser_script is required for browser items", field="browser_script")
    if not is_browser_item(item):
        raise ValidationError(f"item type must be Browser ({ITEM_TYPE_BROWSER})", field="type")


def validate_item_for_version(item: dict[str, Any], version: str) -> None:
    features = compute_feature_map(*parse_version(version))
    if is_browser_item(item) and not features[FEATURE_BROWSER_ITEM]:
        raise UnsupportedFeatureError(FEATURE_BROWSER_ITEM, version)


def validate_host_for_version(host: dict[str, Any], version: str) -> None:
    """
    Check a wire-shaped host against the server's proxy naming.

    Where monitored_by exists, a host that names a proxy must also say it is
    monitored by one; a missing or server (0) value is rejected.
    """
    features = compute_feature_map(*parse_version(version))
    if not features[FEATURE_MONITORED_BY]:
        return
    proxy_id = host.get("proxyid")
    if proxy_id is None or str(proxy_id) in ("", "0"):
        return
    monitored_by = host.get("monitored_by")
    if monitored_by is None or str(monitored_by) == "0":
        raise ValidationError(
            f"monitored_by is required when a proxy is specified in Zabbix {version}",
            field="monitored_by",
        )
