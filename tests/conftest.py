"""
Shared fixtures: deterministic keys, a client wired to a mocked HTTP
session, and in-process fake WebSocket connections.
"""

import asyncio
import json
from typing import Any, List, Optional, Union
from unittest.mock import Mock

import pytest
import requests
from websockets.exceptions import ConnectionClosedOK

from wctl.config import BuildInfo, ClientConfig
from wctl.client import Client
from wctl.crypto.ed25519 import Ed25519KeyPair, Ed25519PrivateKey

TEST_SEED = b'test_seed_for_deterministic_key_pair'


def make_response(status_code: int = 200, body: Any = None, reason: str = "OK") -> requests.Response:
    """Build a real requests.Response with the given status and body."""
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    response.encoding = "utf-8"
    if body is None:
        response._content = b""
    elif isinstance(body, (bytes, bytearray)):
        response._content = bytes(body)
    elif isinstance(body, str):
        response._content = body.encode("utf-8")
    else:
        response._content = json.dumps(body).encode("utf-8")
    return response


class FakeWebSocket:
    """
    Stand-in for a websockets client connection.

    Yields the queued messages, then either raises ``error`` or, when
    ``hold_open`` is set, blocks until closed. Closing makes a pending or
    later ``recv`` raise ConnectionClosedOK.
    """

    def __init__(self, messages: List[Union[str, bytes]], error: Optional[Exception] = None,
                 hold_open: bool = False):
        self.messages = list(messages)
        self.error = error
        self.hold_open = hold_open
        self.close_calls = 0
        self.received = 0
        self._closed = asyncio.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    async def recv(self):
        if self.messages and not self.closed:
            self.received += 1
            return self.messages.pop(0)
        if self.error is not None and not self.closed:
            raise self.error
        if self.hold_open:
            await self._closed.wait()
        raise ConnectionClosedOK(None, None)

    async def close(self):
        self.close_calls += 1
        self._closed.set()


@pytest.fixture
def private_key():
    return Ed25519PrivateKey.from_seed(TEST_SEED)


@pytest.fixture
def keypair(private_key):
    return Ed25519KeyPair(private_key)


@pytest.fixture
def config(private_key):
    return ClientConfig(
        host="localhost",
        port=9000,
        private_key=private_key.to_hex(),
        use_https=False,
        build_info=BuildInfo(version="1.2.3", commit="abc1234", os_arch="linux/amd64"),
    )


@pytest.fixture
def http_session():
    """Mocked requests.Session; set ``request.return_value`` or ``side_effect``."""
    session = Mock(spec=requests.Session)
    session.request.return_value = make_response(200, {})
    return session


@pytest.fixture
def client(config, http_session):
    c = Client(config, session=http_session)
    yield c
    c.close()


@pytest.fixture
def fake_ws_factory(monkeypatch):
    """
    Patch the stream consumer's connect call.

    Returns a list that records ``(url, headers, ws)`` for every connection;
    assign ``factory.next`` to the FakeWebSocket the next poll should get.
    """

    class Factory:
        def __init__(self):
            self.connections = []
            self.next: Optional[FakeWebSocket] = None

    factory = Factory()

    async def fake_connect(url, headers):
        ws = factory.next if factory.next is not None else FakeWebSocket([])
        factory.next = None
        factory.connections.append((url, headers, ws))
        return ws

    monkeypatch.setattr("wctl.client.streaming.connect_websocket", fake_connect)
    return factory
