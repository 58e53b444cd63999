"""
Runtime support for the wctl client.
"""

from .errors import (
    ErrorCode, WctlError, HTTPStatusError, DecodeError, EncodeError, InvalidKeyError
)

__all__ = [
    "ErrorCode",
    "WctlError",
    "HTTPStatusError",
    "DecodeError",
    "EncodeError",
    "InvalidKeyError",
]
