"""ZabbixAPI: wires transport, caller, session, version manager and the resource facades."""

from __future__ import annotations

from typing import Any

from loguru import logger

from zabbixbridge.adapters.base import ResourceType
from zabbixbridge.config.schema import ClientConfig
from zabbixbridge.facade import catalog
from zabbixbridge.facade.resources import ResourceFacade
from zabbixbridge.models.validation import ITEM_TYPE_BROWSER, validate_browser_item
from zabbixbridge.rpc.caller import LogSink, RpcCaller
from zabbixbridge.rpc.transport import HttpxTransport, Transport
from zabbixbridge.session import Session
from zabbixbridge.utils.exceptions import UnsupportedFeatureError, ZabbixBridgeError
from zabbixbridge.versioning.features import FEATURE_BROWSER_ITEM, FEATURE_HISTORY_PUSH, FEATURE_MFA
from zabbixbridge.versioning.manager import VersionManager, fetch_version


class ZabbixAPI:
    """
    Client for Zabbix 6.x and 7.x servers.

    Usage:
        api = ZabbixAPI(ClientConfig(url="https://zbx.example/api_jsonrpc.php"))
        api.login("Admin", "zabbix")
        item = {"hostid": "10084", "key_": "web.check", "headers_map": {"Accept": "text/html"}}
        api.items.create([item])   # item["itemid"] is set afterwards
        api.logout()

    The server version is detected on first login unless ``config.version`` pins it.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        transport: Transport | None = None,
        log_sink: LogSink | None = None,
    ):
        self.config = config or ClientConfig()
        self.transport = transport or HttpxTransport(
            self.config.url,
            timeout=self.config.timeout_seconds,
            verify=self.config.tls_verify,
            user_agent=self.config.user_agent,
        )
        self.caller = RpcCaller(self.transport, serialize=self.config.serialize, log_sink=log_sink)
        self.versions = VersionManager()
        self.session = Session(self.caller, self.versions)

        self.items = self._facade(catalog.ITEM)
        self.item_prototypes = self._facade(catalog.ITEM_PROTOTYPE)
        self.hosts = self._facade(catalog.HOST)
        self.host_prototypes = self._facade(catalog.HOST_PROTOTYPE)
        self.host_groups = self._facade(catalog.HOST_GROUP)
        self.users = self._facade(catalog.USER)
        self.media_types = self._facade(catalog.MEDIA_TYPE)
        self.alerts = self._facade(catalog.ALERT)
        self.mfa = self._facade(catalog.MFA)
        self.proxy_groups = self._facade(catalog.PROXY_GROUP)
        self.proxies = self._facade(catalog.PROXY)

        if self.config.version:
            self.force_version(self.config.version)

    def _facade(self, resource: ResourceType) -> ResourceFacade:
        return ResourceFacade(resource, self.session, self.config)

    def _require(self, feature: str) -> None:
        if not self.versions.is_feature_supported(feature):
            raise UnsupportedFeatureError(feature, self.versions.version)

    # Session

    def login(self, user: str | None = None, password: str | None = None) -> str:
        """Log in with the given credentials, falling back to the configured ones."""
        return self.session.login(
            self.config.user if user is None else user,
            self.config.password if password is None else password,
        )

    def logout(self) -> None:
        self.session.logout()

    def current_token(self) -> str:
        return self.session.current_token()

    def call(self, method: str, params: Any = None) -> Any:
        """Raw authenticated call for methods without a facade."""
        return self.caller.call(method, params)

    # Version

    def detect_version(self) -> str:
        return self.session.detect_version()

    def force_version(self, version: str) -> None:
        self.session.force_version(version)

    def is_feature_supported(self, feature: str) -> bool:
        return self.versions.is_feature_supported(feature)

    def supported_features(self) -> list[str]:
        return self.versions.supported_features()

    @property
    def server_version(self) -> str:
        return self.versions.version

    def api_version(self) -> str:
        """Ask the server for its version without touching the detected one."""
        return fetch_version(self.caller)

    # 7.x only

    def history_push(self, records: list[dict[str, Any]]) -> Any:
        """
        Push values to trapper/HTTP agent items with history.push.

        Each record carries ``itemid`` or ``host`` + ``key``, plus ``value`` and
        optionally ``clock``/``ns``.
        """
        self._require(FEATURE_HISTORY_PUSH)
        return self.caller.call("history.push", records)

    def user_reset_totp(self, user_ids: list[str]) -> Any:
        self._require(FEATURE_MFA)
        return self.caller.call("user.resettotp", {"userids": [str(x) for x in user_ids]})

    def create_browser_items(self, items: list[dict[str, Any]]) -> list[str]:
        self._require(FEATURE_BROWSER_ITEM)
        for item in items:
            item["type"] = ITEM_TYPE_BROWSER
            validate_browser_item(item)
        return self.items.create(items)

    def get_browser_items(self, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        self._require(FEATURE_BROWSER_ITEM)
        query = dict(params or {})
        query["filter"] = {**(query.get("filter") or {}), "type": ITEM_TYPE_BROWSER}
        return self.items.get(query)

    def close(self) -> None:
        """Log out if a session is open. Remote failures are logged, not raised."""
        if not self.session.authenticated:
            return
        try:
            self.logout()
        except ZabbixBridgeError as exc:
            logger.warning("Logout during close failed: {}", exc)

    def __enter__(self) -> ZabbixAPI:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
