"""Version detection and the feature table."""

from .features import (
    FEATURE_AUTH_HEADER,
    FEATURE_BROWSER_ITEM,
    FEATURE_COMPATIBLE,
    FEATURE_HEADERS_ARRAY,
    FEATURE_HISTORY_PUSH,
    FEATURE_MFA,
    FEATURE_MONITORED_BY,
    FEATURE_PROXY_GROUP,
    FEATURE_PROXY_ID,
    FEATURES,
    compute_feature_map,
)
from .manager import VersionManager, fetch_version, parse_version

__all__ = [
    "FEATURE_AUTH_HEADER",
    "FEATURE_BROWSER_ITEM",
    "FEATURE_COMPATIBLE",
    "FEATURE_HEADERS_ARRAY",
    "FEATURE_HISTORY_PUSH",
    "FEATURE_MFA",
    "FEATURE_MONITORED_BY",
    "FEATURE_PROXY_GROUP",
    "FEATURE_PROXY_ID",
    "FEATURES",
    "compute_feature_map",
    "VersionManager",
    "fetch_version",
    "parse_version",
]
