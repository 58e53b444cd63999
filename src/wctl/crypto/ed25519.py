"""
Ed25519 keys for signing session challenges and transactions.

Private keys are accepted either as a 32-byte seed or in the node's native
64-byte form (seed followed by the public key).
"""

from __future__ import annotations
import hashlib
from typing import Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey as CryptoEd25519PrivateKey,
    Ed25519PublicKey as CryptoEd25519PublicKey
)
from cryptography.hazmat.primitives import serialization

from ..runtime.errors import InvalidKeyError

SEED_SIZE = 32
PUBLIC_KEY_SIZE = 32
PRIVATE_KEY_SIZE = 64
SIGNATURE_SIZE = 64


class Ed25519PublicKey:
    """Ed25519 public key."""

    def __init__(self, public_key_bytes: bytes):
        """
        Initialize from 32-byte public key.

        Args:
            public_key_bytes: 32-byte Ed25519 public key

        Raises:
            InvalidKeyError: If key is invalid
        """
        if len(public_key_bytes) != PUBLIC_KEY_SIZE:
            raise InvalidKeyError(f"Ed25519 public key must be 32 bytes, got {len(public_key_bytes)}")

        self._key_bytes = bytes(public_key_bytes)
        try:
            self._crypto_key = CryptoEd25519PublicKey.from_public_bytes(self._key_bytes)
        except ValueError as e:
            raise InvalidKeyError("Invalid Ed25519 public key", cause=e) from e

    @classmethod
    def from_hex(cls, hex_string: str) -> Ed25519PublicKey:
        """Create public key from hex string."""
        try:
            key_bytes = bytes.fromhex(hex_string)
        except ValueError as e:
            raise InvalidKeyError("Invalid hex string", cause=e) from e
        return cls(key_bytes)

    def to_bytes(self) -> bytes:
        """Get the 32-byte public key."""
        return self._key_bytes

    def to_hex(self) -> str:
        """Get the public key as lowercase hex."""
        return self._key_bytes.hex()

    def verify(self, signature: bytes, message: bytes) -> bool:
        """
        Verify a signature against a message.

        Args:
            signature: 64-byte Ed25519 signature
            message: Message that was signed

        Returns:
            True if signature is valid
        """
        if len(signature) != SIGNATURE_SIZE:
            return False
        try:
            self._crypto_key.verify(signature, message)
        except InvalidSignature:
            return False
        return True

    def __eq__(self, other) -> bool:
        if not isinstance(other, Ed25519PublicKey):
            return False
        return self._key_bytes == other._key_bytes

    def __hash__(self) -> int:
        return hash(self._key_bytes)

    def __repr__(self) -> str:
        return f"Ed25519PublicKey.from_hex('{self.to_hex()}')"


class Ed25519PrivateKey:
    """
    Ed25519 private key.

    Signing is deterministic: the same key and message always produce the
    same signature.
    """

    def __init__(self, seed: bytes):
        """
        Initialize from a 32-byte seed.

        Args:
            seed: 32-byte Ed25519 private key seed

        Raises:
            InvalidKeyError: If the seed has the wrong size
        """
        if len(seed) != SEED_SIZE:
            raise InvalidKeyError(f"Ed25519 seed must be 32 bytes, got {len(seed)}")

        self._seed = bytes(seed)
        self._crypto_key = CryptoEd25519PrivateKey.from_private_bytes(self._seed)
        self._public_key = Ed25519PublicKey(
            self._crypto_key.public_key().public_bytes(
                encoding=serialization.Encoding.Raw,
                format=serialization.PublicFormat.Raw
            )
        )

    @classmethod
    def generate(cls) -> Ed25519PrivateKey:
        """Generate a new random private key."""
        crypto_key = CryptoEd25519PrivateKey.generate()
        return cls(crypto_key.private_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PrivateFormat.Raw,
            encryption_algorithm=serialization.NoEncryption()
        ))

    @classmethod
    def from_bytes(cls, key_bytes: bytes) -> Ed25519PrivateKey:
        """
        Create a private key from a seed or a 64-byte private key.

        A 64-byte key is ``seed ++ public key``; its public half must match
        the key derived from the seed.

        Raises:
            InvalidKeyError: If the size is wrong or the halves disagree
        """
        if len(key_bytes) == SEED_SIZE:
            return cls(key_bytes)

        if len(key_bytes) != PRIVATE_KEY_SIZE:
            raise InvalidKeyError(
                f"Ed25519 private key must be 32 or 64 bytes, got {len(key_bytes)}"
            )

        key = cls(key_bytes[:SEED_SIZE])
        if key.public_key().to_bytes() != key_bytes[SEED_SIZE:]:
            raise InvalidKeyError("Public half of private key does not match its seed")
        return key

    @classmethod
    def from_hex(cls, hex_string: str) -> Ed25519PrivateKey:
        """Create a private key from its hex form (32 or 64 bytes)."""
        try:
            key_bytes = bytes.fromhex(hex_string.strip())
        except ValueError as e:
            raise InvalidKeyError("Invalid hex string", cause=e) from e
        return cls.from_bytes(key_bytes)

    @classmethod
    def from_seed(cls, seed: Union[str, bytes]) -> Ed25519PrivateKey:
        """
        Derive a private key from an arbitrary seed using SHA-256.

        For deterministic test keys.
        """
        if isinstance(seed, str):
            seed = seed.encode('utf-8')
        return cls(hashlib.sha256(seed).digest())

    def seed(self) -> bytes:
        """Get the 32-byte seed."""
        return self._seed

    def to_bytes(self) -> bytes:
        """Get the 64-byte private key (seed followed by public key)."""
        return self._seed + self._public_key.to_bytes()

    def to_hex(self) -> str:
        """Get the 64-byte private key as hex."""
        return self.to_bytes().hex()

    def public_key(self) -> Ed25519PublicKey:
        """Get the corresponding public key."""
        return self._public_key

    def sign(self, message: bytes) -> bytes:
        """
        Sign a message.

        Args:
            message: Message to sign

        Returns:
            64-byte Ed25519 signature
        """
        return self._crypto_key.sign(message)

    def __repr__(self) -> str:
        return f"Ed25519PrivateKey(public={self._public_key.to_hex()})"


class Ed25519KeyPair:
    """Ed25519 key pair holding both private and public keys."""

    def __init__(self, private_key: Ed25519PrivateKey):
        self.private_key = private_key
        self.public_key = private_key.public_key()

    @classmethod
    def generate(cls) -> Ed25519KeyPair:
        """Generate a new random key pair."""
        return cls(Ed25519PrivateKey.generate())

    @classmethod
    def from_private_hex(cls, hex_string: str) -> Ed25519KeyPair:
        """Create key pair from a 32- or 64-byte private key in hex."""
        return cls(Ed25519PrivateKey.from_hex(hex_string))

    @classmethod
    def from_seed(cls, seed: Union[str, bytes]) -> Ed25519KeyPair:
        """Create a deterministic key pair from an arbitrary seed."""
        return cls(Ed25519PrivateKey.from_seed(seed))

    def sign(self, message: bytes) -> bytes:
        """Sign a message and return signature bytes."""
        return self.private_key.sign(message)

    def verify(self, message: bytes, signature: bytes) -> bool:
        """Verify a signature made by this key pair."""
        return self.public_key.verify(signature, message)

    def public_key_bytes(self) -> bytes:
        """Get the 32-byte public key."""
        return self.public_key.to_bytes()

    def public_key_hex(self) -> str:
        """Get the public key as lowercase hex."""
        return self.public_key.to_hex()
