"""
Transaction construction and submission.

Builds the signed ``TxRequest`` for a tag and payload and sends it to the
node. The node assigns the transaction id and parents; the client passes its
acknowledgment through without checking either.
"""

from __future__ import annotations
import logging

from ..client.dispatcher import RequestDispatcher
from ..codec.wire import TxRequest, TxResponse
from ..routes import ROUTE_TX_SEND
from ..signers.signer import Signer
from .transfer import Marshalable

logger = logging.getLogger(__name__)


class TransactionBuilder:
    """Signs and submits transactions."""

    def __init__(self, signer: Signer, dispatcher: RequestDispatcher):
        self.signer = signer
        self.dispatcher = dispatcher

    def build(self, tag: int, payload: bytes) -> TxRequest:
        """
        Build a signed transaction request.

        Args:
            tag: Transaction tag (0-255)
            payload: Raw payload bytes

        Returns:
            TxRequest ready to send

        Raises:
            ValueError: If the tag does not fit in one byte
        """
        signature = self.signer.sign_transaction(tag, payload)
        return TxRequest.create(
            sender=self.signer.public_key,
            tag=int(tag),
            payload=payload,
            signature=signature,
        )

    def send(self, tag: int, payload: bytes) -> TxResponse:
        """Sign a raw payload and submit it."""
        request = self.build(tag, payload)
        response = self.dispatcher.request(ROUTE_TX_SEND, "POST", request, TxResponse)
        logger.debug(f"Submitted tx {response.tx_id} (tag={request.tag}, critical={response.is_critical})")
        return response

    def send_transfer(self, tag: int, transfer: Marshalable) -> TxResponse:
        """Serialize a structured payload and submit it."""
        return self.send(tag, transfer.marshal())
