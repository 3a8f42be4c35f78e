"""Configuration schema using Pydantic."""

from __future__ import annotations

from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientConfig(BaseSettings):
    """Connection and behaviour settings for ZabbixAPI."""

    url: str = "http://localhost/api_jsonrpc.php"
    user: str = ""
    password: str = ""
    timeout_seconds: float = 20.0
    tls_verify: bool = True
    # Run each call's build/send/receive/decode under one lock.
    serialize: bool = False
    user_agent: str = "zabbixbridge"
    # Pin the server version instead of asking apiinfo.version (e.g. "6.4.0").
    version: str | None = None
    default_output: Any = "extend"
    # resource name (item, host, ...) -> "output" used when a get() query has none
    output_overrides: dict[str, Any] = Field(default_factory=dict)

    model_config = SettingsConfigDict(
        env_prefix="ZABBIXBRIDGE_",
        env_nested_delimiter="__",
    )

    def output_for(self, resource: str) -> Any:
        return self.output_overrides.get(resource, self.default_output)
