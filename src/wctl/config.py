"""
Client configuration.

Build information for the user agent is passed in explicitly rather than read
from process-wide state.
"""

from __future__ import annotations
import platform
from dataclasses import dataclass, field
from typing import Optional

from ._version import __version__


def _default_os_arch() -> str:
    return f"{platform.system().lower()}/{platform.machine().lower()}"


@dataclass(frozen=True)
class BuildInfo:
    """Client build description reported in the ``User-Agent`` header."""

    version: str = __version__
    commit: str = "unknown"
    os_arch: str = field(default_factory=_default_os_arch)

    def user_agent(self) -> str:
        """Short summary of the client type making the connection."""
        return f"wctl/{self.version}-{self.commit} ({self.os_arch})"


@dataclass
class ClientConfig:
    """Configuration for a ledger node client."""

    host: str
    port: int
    private_key: str
    use_https: bool = False
    build_info: BuildInfo = field(default_factory=BuildInfo)
    timeout: Optional[float] = None

    def __post_init__(self):
        if not self.host:
            raise ValueError("host must not be empty")
        if not 0 < int(self.port) < 65536:
            raise ValueError(f"port out of range: {self.port}")

    @property
    def http_scheme(self) -> str:
        return "https" if self.use_https else "http"

    @property
    def ws_scheme(self) -> str:
        return "wss" if self.use_https else "ws"

    def http_url(self, path: str) -> str:
        """Absolute HTTP(S) URL for a route path."""
        return f"{self.http_scheme}://{self.host}:{self.port}{_rooted(path)}"

    def ws_url(self, path: str) -> str:
        """Absolute WS(S) URL for a route path."""
        return f"{self.ws_scheme}://{self.host}:{self.port}{_rooted(path)}"


def _rooted(path: str) -> str:
    return path if path.startswith("/") else "/" + path
