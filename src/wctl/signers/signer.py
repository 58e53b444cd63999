"""
Signer for session challenges and transactions.

Two messages are ever signed by the client:

* the session challenge ``"<publicKeyHex><epochMillis>"``
* the transaction signing input ``nonce(8) ++ tag(1) ++ payload``

The nonce is always eight zero bytes. Nodes verify against exactly this
layout, so it must not change without a matching server change.
"""

from __future__ import annotations
from typing import Union

from ..crypto.ed25519 import Ed25519KeyPair, Ed25519PrivateKey

NONCE_SIZE = 8
ZERO_NONCE = bytes(NONCE_SIZE)


def transaction_signing_input(tag: int, payload: bytes) -> bytes:
    """
    Build the bytes a transaction signature covers.

    Args:
        tag: Transaction tag (0-255)
        payload: Raw transaction payload

    Returns:
        ``zero nonce ++ tag ++ payload``

    Raises:
        ValueError: If the tag does not fit in one byte
    """
    if not 0 <= tag <= 0xFF:
        raise ValueError(f"tag must be in [0, 255], got {tag}")
    return ZERO_NONCE + bytes([tag]) + bytes(payload)


def session_challenge(public_key_hex: str, time_millis: int) -> bytes:
    """Build the session-init challenge string as bytes."""
    return f"{public_key_hex}{time_millis}".encode("ascii")


class Signer:
    """Signs client messages with an Ed25519 key pair."""

    def __init__(self, keypair: Union[Ed25519KeyPair, Ed25519PrivateKey]):
        if isinstance(keypair, Ed25519PrivateKey):
            keypair = Ed25519KeyPair(keypair)
        self.keypair = keypair

    @property
    def public_key(self) -> bytes:
        return self.keypair.public_key_bytes()

    @property
    def public_key_hex(self) -> str:
        return self.keypair.public_key_hex()

    def sign(self, message: bytes) -> bytes:
        """Sign arbitrary bytes. Deterministic for a given key and message."""
        return self.keypair.sign(message)

    def sign_session(self, time_millis: int) -> bytes:
        """Sign the session challenge for the given timestamp."""
        return self.sign(session_challenge(self.public_key_hex, time_millis))

    def sign_transaction(self, tag: int, payload: bytes) -> bytes:
        """Sign a transaction tag and payload."""
        return self.sign(transaction_signing_input(tag, payload))

    def verify(self, message: bytes, signature: bytes) -> bool:
        return self.keypair.verify(message, signature)
