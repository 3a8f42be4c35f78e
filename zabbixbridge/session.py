"""Auth token lifecycle and version-driven adapter selection."""

from __future__ import annotations

from loguru import logger

from zabbixbridge.adapters.base import ResourceAdapter, ResourceType
from zabbixbridge.adapters.selection import select_adapter
from zabbixbridge.rpc.caller import RpcCaller
from zabbixbridge.utils.exceptions import DecodeError, ZabbixBridgeError
from zabbixbridge.versioning.features import FEATURE_AUTH_HEADER
from zabbixbridge.versioning.manager import VersionManager


class Session:
    """
    Owns the token and the adapters selected for the current server version.

    Login and logout modify shared state; do not run them concurrently with other
    calls on the same session. The same applies to version re-detection, which
    replaces every selected adapter.
    """

    def __init__(self, caller: RpcCaller, versions: VersionManager | None = None):
        self.caller = caller
        self.versions = versions or VersionManager()
        self._resources: dict[str, ResourceType] = {}
        self._adapters: dict[str, ResourceAdapter] = {}
        self.versions.add_listener(self._on_version_change)
        self._on_version_change(self.versions)

    def current_token(self) -> str:
        return self.caller.auth_token

    @property
    def authenticated(self) -> bool:
        return bool(self.caller.auth_token)

    def login(self, user: str, password: str) -> str:
        """Call user.login without a token; detect the version once if still unknown."""
        result = self.caller.call(
            "user.login",
            {"username": user, "password": password},
            authenticated=False,
        )
        if not isinstance(result, str) or not result:
            raise DecodeError("result", result, "user.login must return a session token")
        self.caller.auth_token = result

        if not self.versions.known:
            try:
                self.detect_version()
            except ZabbixBridgeError as exc:
                logger.warning("Failed to detect Zabbix version after login: {}", exc)
        return result

    def logout(self) -> None:
        """
        Call user.logout and drop the local token.

        The token is cleared even when the remote call fails; the failure is still
        raised. A detected version is forgotten so the next login detects again.
        """
        if not self.caller.auth_token:
            return
        try:
            self.caller.call("user.logout", [])
        except ZabbixBridgeError as exc:
            logger.warning("Remote logout failed, clearing local session anyway: {}", exc)
            raise
        finally:
            self.caller.auth_token = ""
            if not self.versions.forced:
                self.versions.reset()

    def detect_version(self) -> str:
        version = self.versions.detect(self.caller)
        logger.info("Detected Zabbix version: {}", version)
        return version

    def force_version(self, version: str) -> None:
        self.versions.force_version(version)

    def register(self, resource: ResourceType) -> ResourceAdapter:
        self._resources[resource.name] = resource
        adapter = select_adapter(resource, self.versions, self.caller)
        self._adapters[resource.name] = adapter
        return adapter

    def adapter_for(self, resource: ResourceType) -> ResourceAdapter:
        adapter = self._adapters.get(resource.name)
        if adapter is None:
            adapter = self.register(resource)
        return adapter

    def _on_version_change(self, versions: VersionManager) -> None:
        self.caller.auth_in_header = versions.is_feature_supported(FEATURE_AUTH_HEADER)
        self._adapters = {
            name: select_adapter(resource, versions, self.caller)
            for name, resource in self._resources.items()
        }
        if versions.known:
            selected = ", ".join(f"{name}={type(a).__name__}" for name, a in sorted(self._adapters.items()))
            logger.info("Adapters for Zabbix {}: {}", versions.version, selected or "none registered")
