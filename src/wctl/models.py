"""
Response and event models decoded with pydantic.

These cover the low-traffic endpoints and the account update stream. All
models ignore unknown input shapes gracefully: missing fields take defaults.
"""

from __future__ import annotations
import base64
import binascii
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field


class Credentials(BaseModel):
    """Session-init request body. Built fresh for every init call."""

    public_key: str = Field(description="Hex-encoded public key")
    time_millis: int = Field(description="Epoch milliseconds used in the challenge")
    sig: str = Field(description="Hex-encoded challenge signature")


class SessionResponse(BaseModel):
    """Session-init response."""

    model_config = ConfigDict(extra="ignore")

    token: str = ""


class AccountUpdateEvent(BaseModel):
    """
    One update to an account, pushed on the account poll stream.

    Field values are base64 strings as emitted by the node; use
    ``field_bytes`` to get the raw value.
    """

    model_config = ConfigDict(extra="allow")

    account: str = ""
    fields: Dict[str, str] = Field(default_factory=dict)

    def field_bytes(self, name: str) -> bytes:
        """
        Decode one field value.

        Raises:
            KeyError: If the field is not present
            ValueError: If the value is not valid base64
        """
        try:
            return base64.b64decode(self.fields[name], validate=True)
        except binascii.Error as e:
            raise ValueError(f"field {name!r} is not valid base64: {e}") from e


class ServerVersion(BaseModel):
    """Build information reported by the node."""

    model_config = ConfigDict(extra="allow")

    version: str = ""
    git_commit: str = ""
    go_version: str = ""
    os_arch: str = ""


class LedgerState(BaseModel):
    """Summary of the node's view of the ledger."""

    model_config = ConfigDict(extra="allow")

    public_key: str = ""
    address: str = ""
    peers: List[str] = Field(default_factory=list)
