"""Pytest hooks and fixtures."""

import json
import os

import pytest
from loguru import logger

from zabbixbridge.client import ZabbixAPI
from zabbixbridge.config.schema import ClientConfig
from zabbixbridge.rpc.transport import TransportResponse

TOKEN = "0424bd59b807674191e7d77572075f33"


def pytest_configure(config):
    """Register custom markers (also in pyproject.toml)."""
    config.addinivalue_line(
        "markers",
        "live: talks to a real Zabbix server (needs ZABBIXBRIDGE_URL)",
    )


def pytest_collection_modifyitems(config, items):
    """Skip live tests unless a server URL is configured."""
    if os.environ.get("ZABBIXBRIDGE_URL"):
        return
    skip = pytest.mark.skip(reason="ZABBIXBRIDGE_URL not set")
    for item in items:
        if "live" in item.keywords:
            item.add_marker(skip)


class StubTransport:
    """In-process Zabbix endpoint: canned replies per method, every request recorded."""

    def __init__(self):
        self.requests: list[dict] = []
        self.headers: list[dict] = []
        self._handlers = {}

    def reply(self, method, result):
        self._handlers[method] = lambda frame: {"result": result}

    def fail(self, method, code, message, data=""):
        self._handlers[method] = lambda frame: {"error": {"code": code, "message": message, "data": data}}

    def handle(self, method, func):
        """func(params) -> result"""
        self._handlers[method] = lambda frame: {"result": func(frame["params"])}

    def on(self, method, func):
        """func(frame) -> envelope members ({"result": ...} or {"error": ...}) or a TransportResponse."""
        self._handlers[method] = func

    def raw(self, method, status_code, body: bytes):
        self._handlers[method] = lambda frame: TransportResponse(status_code, body)

    @property
    def calls(self) -> int:
        return len(self.requests)

    @property
    def methods(self) -> list[str]:
        return [r["method"] for r in self.requests]

    def last(self, method=None) -> dict:
        frames = [r for r in self.requests if method is None or r["method"] == method]
        return frames[-1]

    def post(self, body, headers):
        frame = json.loads(body)
        self.requests.append(frame)
        self.headers.append(dict(headers))
        handler = self._handlers.get(frame["method"])
        if handler is None:
            reply = {
                "error": {
                    "code": -32601,
                    "message": "Method not found.",
                    "data": f'Incorrect API "{frame["method"]}".',
                }
            }
        else:
            reply = handler(frame)
        if isinstance(reply, TransportResponse):
            return reply
        envelope = {"jsonrpc": "2.0", "id": frame["id"], **reply}
        return TransportResponse(200, json.dumps(envelope).encode("utf-8"))


@pytest.fixture
def stub():
    return StubTransport()


@pytest.fixture
def make_api(stub):
    def _make(version=None, **settings):
        config = ClientConfig(url="http://zabbix.test/api_jsonrpc.php", version=version, **settings)
        return ZabbixAPI(config, transport=stub)

    return _make


@pytest.fixture
def logged_in(stub, make_api):
    """Client logged in against a server reporting the given version."""

    def _login(version):
        stub.reply("user.login", TOKEN)
        stub.reply("apiinfo.version", version)
        api = make_api()
        api.login("Admin", "zabbix")
        return api

    return _login


@pytest.fixture
def log_messages():
    messages: list[str] = []
    handler_id = logger.add(lambda msg: messages.append(str(msg)), level="DEBUG", format="{level} {message}")
    yield messages
    logger.remove(handler_id)
