"""Server version detection and feature gating."""

from __future__ import annotations

import re
import threading
from typing import TYPE_CHECKING, Callable

from loguru import logger

from zabbixbridge.utils.exceptions import DecodeError, ProtocolError
from zabbixbridge.versioning.features import FEATURE_COMPATIBLE, FEATURES, compute_feature_map

if TYPE_CHECKING:
    from zabbixbridge.rpc.caller import RpcCaller

VERSION_METHOD = "apiinfo.version"

# Older servers answer an unauthenticated apiinfo.version with "invalid params".
_INVALID_PARAMS = -32602

_LEADING_INT = re.compile(r"\s*(\d+)")

VersionListener = Callable[["VersionManager"], None]


def _leading_int(token: str) -> int:
    match = _LEADING_INT.match(token or "")
    return int(match.group(1)) if match else 0


def parse_version(version: str) -> tuple[int, int]:
    """Split "7.0.3" into (7, 0). Missing or unparsable parts become 0."""
    parts = (version or "").strip().split(".")
    major = _leading_int(parts[0]) if parts else 0
    minor = _leading_int(parts[1]) if len(parts) > 1 else 0
    return major, minor


def fetch_version(caller: RpcCaller) -> str:
    """
    Call apiinfo.version without a token.

    Servers that answer "invalid params" to the anonymous call get one more
    attempt with the session token, if there is one.
    """
    try:
        version = caller.call(VERSION_METHOD, [], authenticated=False)
    except ProtocolError as exc:
        if exc.rpc_code != _INVALID_PARAMS or not caller.auth_token:
            raise
        logger.debug("apiinfo.version rejected without auth, retrying with session token")
        version = caller.call(VERSION_METHOD, [], authenticated=True)
    if not isinstance(version, str):
        raise DecodeError("result", version, "apiinfo.version must return a string")
    return version


class VersionManager:
    """
    Holds the detected (or forced) server version and the feature map derived from it.

    The map is recomputed from scratch on every change and listeners are notified
    afterwards, so anything that depends on the version (adapter selection, auth
    placement) is refreshed as part of the same change.
    """

    def __init__(self) -> None:
        self._version = ""
        self._major = 0
        self._minor = 0
        self._forced = False
        self._features: dict[str, bool] = compute_feature_map(0, 0)
        self._listeners: list[VersionListener] = []
        self._lock = threading.RLock()

    @property
    def version(self) -> str:
        return self._version

    @property
    def major(self) -> int:
        return self._major

    @property
    def minor(self) -> int:
        return self._minor

    @property
    def forced(self) -> bool:
        return self._forced

    @property
    def known(self) -> bool:
        return bool(self._version)

    def add_listener(self, listener: VersionListener) -> None:
        self._listeners.append(listener)

    def detect(self, caller: RpcCaller) -> str:
        """Ask the server for its version and apply it."""
        version = fetch_version(caller)
        self._apply(version, forced=False)
        return version

    def force_version(self, version: str) -> None:
        """Pin a version without asking the server (tests, known deployments)."""
        self._apply(version, forced=True)
        logger.info("Forced Zabbix version to: {}", version)

    def reset(self) -> None:
        self._apply("", forced=False)

    def is_feature_supported(self, name: str) -> bool:
        return self._features.get(name, False)

    def major_at_least(self, n: int) -> bool:
        return self._major >= n

    def feature_map(self) -> dict[str, bool]:
        return dict(self._features)

    def supported_features(self) -> list[str]:
        return [name for name in FEATURES if self._features.get(name)]

    def _apply(self, version: str, *, forced: bool) -> None:
        with self._lock:
            major, minor = parse_version(version)
            self._version = version
            self._major = major
            self._minor = minor
            self._forced = forced
            self._features = compute_feature_map(major, minor)
            if version and not self._features[FEATURE_COMPATIBLE]:
                logger.warning("Zabbix version {} is outside the supported 6.x/7.x range", version)
            for listener in list(self._listeners):
                listener(self)
