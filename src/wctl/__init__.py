"""
wctl - Python client for a ledger node.

Session authentication by challenge signing, signed transaction submission,
ledger queries and live event streams over WebSockets.
"""

from ._version import __version__
from .config import BuildInfo, ClientConfig
from .runtime.errors import *
from .crypto import Ed25519KeyPair, Ed25519PrivateKey, Ed25519PublicKey
from .signers import Signer
from .codec import Transaction, TransactionList, TxRequest, TxResponse
from .models import AccountUpdateEvent, Credentials, LedgerState, ServerVersion, SessionResponse
from .client import (
    Client, RequestDispatcher, RequestOptions, SessionManager, EventStream, StreamConsumer
)
from .tx import Tag, Transfer, TransactionBuilder

__all__ = [
    "__version__",
    # Configuration
    "BuildInfo",
    "ClientConfig",

    # Client
    "Client",
    "RequestDispatcher",
    "RequestOptions",
    "SessionManager",
    "EventStream",
    "StreamConsumer",

    # Keys and signing
    "Ed25519KeyPair",
    "Ed25519PrivateKey",
    "Ed25519PublicKey",
    "Signer",

    # Wire types
    "Transaction",
    "TransactionList",
    "TxRequest",
    "TxResponse",
    "AccountUpdateEvent",
    "Credentials",
    "LedgerState",
    "ServerVersion",
    "SessionResponse",

    # Transactions
    "Tag",
    "Transfer",
    "TransactionBuilder",

    # Errors
    "ErrorCode",
    "WctlError",
    "HTTPStatusError",
    "DecodeError",
    "EncodeError",
    "InvalidKeyError",
]
