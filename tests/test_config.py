"""
Configuration and user agent tests.
"""

import pytest

from wctl import __version__
from wctl.config import BuildInfo, ClientConfig


def test_user_agent_format():
    info = BuildInfo(version="0.1.0", commit="deadbee", os_arch="linux/amd64")
    assert info.user_agent() == "wctl/0.1.0-deadbee (linux/amd64)"


def test_default_build_info():
    info = BuildInfo()
    assert info.version == __version__
    assert info.commit == "unknown"
    assert "/" in info.os_arch


def test_urls():
    config = ClientConfig(host="localhost", port=9000, private_key="")
    assert config.http_url("/tx") == "http://localhost:9000/tx"
    assert config.ws_url("poll/tx") == "ws://localhost:9000/poll/tx"


def test_tls_urls():
    config = ClientConfig(host="node", port=443, private_key="", use_https=True)
    assert config.http_url("/tx") == "https://node:443/tx"
    assert config.ws_url("/poll/tx") == "wss://node:443/poll/tx"


@pytest.mark.parametrize("port", [0, -1, 65536])
def test_bad_port(port):
    with pytest.raises(ValueError):
        ClientConfig(host="localhost", port=port, private_key="")


def test_empty_host():
    with pytest.raises(ValueError):
        ClientConfig(host="", port=1, private_key="")
