"""
Transport layer for the wctl client.
"""

from .ws import connect_websocket, stream_url

__all__ = [
    "connect_websocket",
    "stream_url",
]
