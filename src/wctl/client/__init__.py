"""
Client components: dispatcher, session manager, streams and the facade.
"""

from .dispatcher import RequestDispatcher, RequestOptions
from .session import SessionManager
from .streaming import EventStream, StreamConsumer
from .wctl_client import Client

__all__ = [
    "Client",
    "RequestDispatcher",
    "RequestOptions",
    "SessionManager",
    "EventStream",
    "StreamConsumer",
]
