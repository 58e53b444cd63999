"""
Ledger node client.

``Client`` ties the pieces together: a signer built from the configured key,
one dispatcher with a pooled HTTP session, the session manager, the stream
consumer and the transaction builder.

Example:
    ```python
    config = ClientConfig(host="localhost", port=9000, private_key=key_hex)
    with Client(config) as client:
        client.init()
        ack = client.send_transfer(Tag.TRANSFER, Transfer.to(recipient, 100))
        txs = client.list_transactions(limit=10)
    ```
"""

from __future__ import annotations
import asyncio
import base64
import binascii
import logging
import os
from typing import Any, Dict, List, Optional, Union
from urllib.parse import urlencode

import requests
from urllib3.filepost import encode_multipart_formdata

from ..codec.wire import Transaction, TransactionList, TxResponse
from ..config import ClientConfig
from ..crypto.ed25519 import Ed25519KeyPair
from ..models import AccountUpdateEvent, LedgerState, ServerVersion
from ..routes import (
    EVENT_ACCEPTED, EVENT_APPLIED, ROUTE_ACCOUNT_LOAD, ROUTE_CONTRACT_SEND,
    ROUTE_LEDGER_STATE, ROUTE_SERVER_VERSION, ROUTE_STATS_RESET, ROUTE_TX_LIST,
    UPLOAD_FORM_FIELD,
)
from ..runtime.errors import DecodeError
from ..signers.signer import Signer
from ..tx.builder import TransactionBuilder
from ..tx.transfer import Marshalable
from .dispatcher import RequestDispatcher, RequestOptions
from .session import SessionManager
from .streaming import EventStream, StreamConsumer

logger = logging.getLogger(__name__)

ID = Union[str, bytes]


def _id_hex(value: ID) -> str:
    return value.hex() if isinstance(value, (bytes, bytearray)) else value


class Client:
    """
    Client for one ledger node.

    HTTP calls are synchronous. Poll methods are coroutines returning an
    ``EventStream``; each stream runs its own reader task.
    """

    def __init__(self, config: ClientConfig, session: Optional[requests.Session] = None):
        """
        Initialize the client.

        Args:
            config: Client configuration with the node address and key
            session: Optional requests.Session to share

        Raises:
            InvalidKeyError: If the configured private key is malformed
        """
        self.config = config
        self.keypair = Ed25519KeyPair.from_private_hex(config.private_key)
        self.signer = Signer(self.keypair)

        self.dispatcher = RequestDispatcher(config, session)
        self.sessions = SessionManager(self.dispatcher, self.signer)
        self.streams = StreamConsumer(self.dispatcher)
        self.builder = TransactionBuilder(self.signer, self.dispatcher)

    @property
    def public_key(self) -> bytes:
        return self.keypair.public_key_bytes()

    @property
    def session_token(self) -> str:
        return self.dispatcher.session_token

    def close(self) -> None:
        self.dispatcher.close()

    def __enter__(self) -> Client:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # =========================================================================
    # Session and raw requests
    # =========================================================================

    def init(self) -> str:
        """Establish a session; returns the new token."""
        return self.sessions.init()

    def request(self, path: str, method: str = "POST", body: Any = None,
                out: Any = None, options: Optional[RequestOptions] = None) -> Any:
        """Make a signed request to any route. See ``RequestDispatcher.request``."""
        return self.dispatcher.request(path, method, body, out, options)

    # =========================================================================
    # Transactions
    # =========================================================================

    def send_transaction(self, tag: int, payload: bytes) -> TxResponse:
        return self.builder.send(tag, payload)

    def send_transfer(self, tag: int, transfer: Marshalable) -> TxResponse:
        return self.builder.send_transfer(tag, transfer)

    def list_transactions(self, sender: Optional[ID] = None, creator: Optional[ID] = None,
                          offset: int = 0, limit: int = 0) -> List[Transaction]:
        """
        List transactions.

        All arguments are optional; zero values leave the node's defaults in
        place.
        """
        params: Dict[str, str] = {}
        if sender is not None:
            params["sender"] = _id_hex(sender)
        if creator is not None:
            params["creator"] = _id_hex(creator)
        if offset:
            params["offset"] = str(offset)
        if limit:
            params["limit"] = str(limit)

        path = ROUTE_TX_LIST
        if params:
            path = f"{path}?{urlencode(params)}"

        return self.dispatcher.request(path, "GET", None, TransactionList)

    def recent_transactions(self) -> List[Transaction]:
        return self.dispatcher.request(ROUTE_TX_LIST, "GET", None, TransactionList)

    def get_transaction(self, tx_id: ID) -> Transaction:
        path = f"{ROUTE_TX_LIST}/{_id_hex(tx_id)}"
        return self.dispatcher.request(path, "GET", None, Transaction)

    # =========================================================================
    # Auxiliary endpoints
    # =========================================================================

    def load_account(self, account_id: ID) -> Dict[str, bytes]:
        """
        Load the state of one account.

        The node sends each field as a base64 string; values are returned
        decoded.

        Raises:
            DecodeError: If a field value is not a valid base64 string
        """
        path = f"{ROUTE_ACCOUNT_LOAD}/{_id_hex(account_id)}"
        raw = self.dispatcher.request(path, "GET", None, dict)

        fields: Dict[str, bytes] = {}
        for name, value in raw.items():
            if not isinstance(value, str):
                raise DecodeError(f"account field {name!r} must be a base64 string")
            try:
                fields[name] = base64.b64decode(value, validate=True)
            except (binascii.Error, ValueError) as e:
                raise DecodeError(f"account field {name!r} is not valid base64", cause=e) from e
        return fields

    def ledger_state(self) -> LedgerState:
        return self.dispatcher.request(ROUTE_LEDGER_STATE, "GET", None, LedgerState)

    def server_version(self) -> ServerVersion:
        return self.dispatcher.request(ROUTE_SERVER_VERSION, "GET", None, ServerVersion)

    def stats_reset(self) -> Dict[str, Any]:
        return self.dispatcher.request(ROUTE_STATS_RESET, "POST", None, dict)

    def send_contract(self, filename: str) -> str:
        """
        Upload a contract file as a multipart form.

        Returns:
            The contract id assigned by the node
        """
        with open(filename, "rb") as fh:
            content = fh.read()

        body, content_type = encode_multipart_formdata({
            UPLOAD_FORM_FIELD: (os.path.basename(filename), content, "application/octet-stream"),
        })
        options = RequestOptions(content_type=content_type, send_raw_bytes=True)

        result = self.dispatcher.request(ROUTE_CONTRACT_SEND, "POST", body, dict, options)
        contract_id = result.get("contract_id", "")
        logger.info(f"Uploaded contract {filename} as {contract_id}")
        return contract_id

    # =========================================================================
    # Streams
    # =========================================================================

    async def poll_accepted_transactions(self, stop: Optional[asyncio.Event] = None) -> EventStream[Transaction]:
        return await self.streams.poll_transactions(EVENT_ACCEPTED, stop)

    async def poll_applied_transactions(self, stop: Optional[asyncio.Event] = None) -> EventStream[Transaction]:
        return await self.streams.poll_transactions(EVENT_APPLIED, stop)

    async def poll_account_updates(self, stop: Optional[asyncio.Event] = None) -> EventStream[AccountUpdateEvent]:
        return await self.streams.poll_account_updates(stop)
