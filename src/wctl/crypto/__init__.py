"""
Cryptographic primitives for wctl.
"""

from .ed25519 import Ed25519PrivateKey, Ed25519PublicKey, Ed25519KeyPair

__all__ = [
    "Ed25519PrivateKey",
    "Ed25519PublicKey",
    "Ed25519KeyPair",
]
