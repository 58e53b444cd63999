"""
Signing support for wctl.
"""

from .signer import Signer, session_challenge, transaction_signing_input, ZERO_NONCE

__all__ = [
    "Signer",
    "session_challenge",
    "transaction_signing_input",
    "ZERO_NONCE",
]
