"""
wctl error model.

Structured exceptions for the failure classes the client can report on its
own: protocol errors (non-2xx HTTP responses), decode errors (malformed wire
JSON) and key errors. Transport failures raised by ``requests`` or
``websockets`` are not wrapped; they reach the caller unmodified.
"""

from __future__ import annotations
from typing import Optional, Dict, Any
from enum import IntEnum


class ErrorCode(IntEnum):
    """Error codes for wctl errors."""

    OK = 0
    UNKNOWN = 1

    # Protocol errors (100-199)
    HTTP_STATUS = 100

    # Encoding errors (200-299)
    DECODE_ERROR = 200
    ENCODE_ERROR = 201

    # Key errors (300-399)
    INVALID_KEY = 300


class WctlError(Exception):
    """
    Base class for all wctl errors.

    Carries an error code, optional structured details and the underlying
    exception, if any.
    """

    def __init__(self, message: str, code: ErrorCode = ErrorCode.UNKNOWN,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        """
        Initialize a wctl error.

        Args:
            message: Error message
            code: Error code
            details: Additional error details
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        parts = [self.message]
        if self.cause:
            parts.append(f"caused by: {self.cause}")
        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        result = {
            "code": self.code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.cause:
            result["cause"] = str(self.cause)
        return result


class HTTPStatusError(WctlError):
    """
    The server answered with a status outside [200, 300).

    The response body is kept as raw text since error bodies are not
    guaranteed to be JSON.
    """

    def __init__(self, status_code: int, status: str, body: str):
        super().__init__(
            f"got an error code {status}: {body}",
            ErrorCode.HTTP_STATUS,
            {"status_code": status_code},
        )
        self.status_code = status_code
        self.status = status
        self.body = body


class DecodeError(WctlError):
    """Structurally invalid JSON received from the server."""

    def __init__(self, message: str = "Decode error", cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.DECODE_ERROR, cause=cause)


class EncodeError(WctlError):
    """A request body could not be encoded."""

    def __init__(self, message: str = "Encode error", cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.ENCODE_ERROR, cause=cause)


class InvalidKeyError(WctlError):
    """Key material is malformed or inconsistent."""

    def __init__(self, message: str = "Invalid key", cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.INVALID_KEY, cause=cause)


__all__ = [
    "ErrorCode",
    "WctlError",
    "HTTPStatusError",
    "DecodeError",
    "EncodeError",
    "InvalidKeyError",
]
