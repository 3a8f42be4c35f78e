"""Resource families known to the client."""

from __future__ import annotations

from zabbixbridge.adapters.base import ResourceType
from zabbixbridge.versioning.features import FEATURE_MFA, FEATURE_PROXY_GROUP

ITEM = ResourceType("item", id_field="itemid", ids_key="itemids", get_ids_param="itemids")
ITEM_PROTOTYPE = ResourceType(
    "itemprototype",
    id_field="itemid",
    ids_key="itemids",
    get_ids_param="itemids",
    delete_ids_key="prototypeids",
)
HOST = ResourceType("host", id_field="hostid", ids_key="hostids", get_ids_param="hostids")
HOST_PROTOTYPE = ResourceType("hostprototype", id_field="hostid", ids_key="hostids", get_ids_param="hostids")
HOST_GROUP = ResourceType("hostgroup", id_field="groupid", ids_key="groupids", get_ids_param="groupids")
USER = ResourceType("user", id_field="userid", ids_key="userids", get_ids_param="userids")
MEDIA_TYPE = ResourceType("mediatype", id_field="mediatypeid", ids_key="mediatypeids", get_ids_param="mediatypeids")
ALERT = ResourceType("alert", id_field="alertid", ids_key="alertids", get_ids_param="alertids", read_only=True)
MFA = ResourceType("mfa", id_field="mfaid", ids_key="mfaids", get_ids_param="mfaids", feature=FEATURE_MFA)
PROXY_GROUP = ResourceType(
    "proxygroup",
    id_field="proxy_groupid",
    ids_key="proxy_groupids",
    get_ids_param="proxy_groupids",
    feature=FEATURE_PROXY_GROUP,
)
PROXY = ResourceType("proxy", id_field="proxyid", ids_key="proxyids", get_ids_param="proxyids")

CATALOG: dict[str, ResourceType] = {
    resource.name: resource
    for resource in (
        ITEM,
        ITEM_PROTOTYPE,
        HOST,
        HOST_PROTOTYPE,
        HOST_GROUP,
        USER,
        MEDIA_TYPE,
        ALERT,
        MFA,
        PROXY_GROUP,
        PROXY,
    )
}
