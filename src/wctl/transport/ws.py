"""
WebSocket transport for the node's poll streams.

Opens a client connection with the session headers attached to the
handshake. After the handshake the node only pushes; the client never sends.
"""

import logging
from typing import Dict, Optional
from urllib.parse import urlencode

import websockets

from ..config import ClientConfig
from ..routes import HEADER_USER_AGENT

logger = logging.getLogger(__name__)


def stream_url(config: ClientConfig, path: str, event: Optional[str] = None) -> str:
    """
    Build the WebSocket URL for a poll route.

    Args:
        config: Client configuration
        path: Poll route path
        event: Optional sub-kind, sent as the ``event`` query parameter

    Returns:
        ``ws(s)://host:port<path>[?event=<event>]``
    """
    url = config.ws_url(path)
    if event:
        url = f"{url}?{urlencode({'event': event})}"
    return url


async def connect_websocket(url: str, headers: Dict[str, str]):
    """
    Open a WebSocket connection.

    The ``User-Agent`` entry of ``headers`` replaces the library's default
    user agent; every other entry is sent as an extra handshake header.
    """
    extra = {k: v for k, v in headers.items() if k != HEADER_USER_AGENT}
    user_agent = headers.get(HEADER_USER_AGENT)

    logger.info(f"Connecting to WebSocket: {url}")
    return await websockets.connect(
        url,
        additional_headers=extra,
        user_agent_header=user_agent,
        close_timeout=5.0,
    )
