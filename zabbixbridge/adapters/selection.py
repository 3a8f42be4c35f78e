"""Adapter selection from the feature table."""

from __future__ import annotations

from zabbixbridge.adapters.base import PassthroughAdapter, ResourceAdapter, ResourceType
from zabbixbridge.adapters.hosts import ProxyHostIdAdapter, ProxyIdAdapter
from zabbixbridge.adapters.items import ListItemAdapter, MapItemAdapter
from zabbixbridge.rpc.caller import RpcCaller
from zabbixbridge.versioning.features import FEATURE_HEADERS_ARRAY, FEATURE_PROXY_ID
from zabbixbridge.versioning.manager import VersionManager

# resource name -> (deciding feature, adapter when off, adapter when on)
ADAPTER_FAMILIES: dict[str, tuple[str, type[ResourceAdapter], type[ResourceAdapter]]] = {
    "item": (FEATURE_HEADERS_ARRAY, MapItemAdapter, ListItemAdapter),
    "itemprototype": (FEATURE_HEADERS_ARRAY, MapItemAdapter, ListItemAdapter),
    "host": (FEATURE_PROXY_ID, ProxyHostIdAdapter, ProxyIdAdapter),
}


def select_adapter(resource: ResourceType, versions: VersionManager, caller: RpcCaller) -> ResourceAdapter:
    family = ADAPTER_FAMILIES.get(resource.name)
    if family is None:
        return PassthroughAdapter(resource, caller)
    feature, when_off, when_on = family
    adapter_cls = when_on if versions.is_feature_supported(feature) else when_off
    return adapter_cls(resource, caller)
