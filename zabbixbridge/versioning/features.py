"""Feature table: the only place that maps server versions to capabilities."""

from __future__ import annotations

from typing import Callable

FEATURE_HISTORY_PUSH = "history.push"
FEATURE_MFA = "mfa"
FEATURE_PROXY_GROUP = "proxygroup"
FEATURE_BROWSER_ITEM = "browser_item"
FEATURE_HEADERS_ARRAY = "headers_array"
FEATURE_PROXY_ID = "proxyid"
FEATURE_MONITORED_BY = "monitored_by"
FEATURE_AUTH_HEADER = "auth_header"
FEATURE_COMPATIBLE = "compatible"

VersionPredicate = Callable[[int, int], bool]


def _major_at_least(threshold: int) -> VersionPredicate:
    return lambda major, minor: major >= threshold


def _at_least(major_threshold: int, minor_threshold: int) -> VersionPredicate:
    return lambda major, minor: (major, minor) >= (major_threshold, minor_threshold)


def _major_in(*majors: int) -> VersionPredicate:
    allowed = frozenset(majors)
    return lambda major, minor: major in allowed


FEATURES: dict[str, VersionPredicate] = {
    FEATURE_HISTORY_PUSH: _major_at_least(7),
    FEATURE_MFA: _major_at_least(7),
    FEATURE_PROXY_GROUP: _major_at_least(7),
    FEATURE_BROWSER_ITEM: _major_at_least(7),
    FEATURE_HEADERS_ARRAY: _major_at_least(7),
    FEATURE_PROXY_ID: _major_at_least(7),
    FEATURE_MONITORED_BY: _major_at_least(7),
    # 7.2 dropped the "auth" envelope member in favour of a bearer header.
    FEATURE_AUTH_HEADER: _at_least(7, 2),
    FEATURE_COMPATIBLE: _major_in(6, 7),
}


def compute_feature_map(major: int, minor: int) -> dict[str, bool]:
    """Evaluate every predicate for one (major, minor) pair."""
    return {name: bool(predicate(major, minor)) for name, predicate in FEATURES.items()}
