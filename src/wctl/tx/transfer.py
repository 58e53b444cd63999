"""
Transaction tags and transfer payloads.

A transfer serializes to the byte layout the node expects:

    recipient (32) ++ amount (u64le)
    [++ gas_limit (u64le) ++ gas_deposit (u64le)
     ++ len(func_name) (u32le) ++ func_name
     ++ len(func_params) (u32le) ++ func_params]

The bracketed part is only written for contract calls, i.e. when a gas limit
or function name is set.
"""

from __future__ import annotations
import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Protocol, Union

RECIPIENT_SIZE = 32


class Tag(IntEnum):
    """Single-byte transaction payload discriminator."""

    NOP = 0
    TRANSFER = 1
    CONTRACT = 2
    STAKE = 3
    BATCH = 4


class Marshalable(Protocol):
    """Anything that serializes itself to a transaction payload."""

    def marshal(self) -> bytes:
        ...


@dataclass(frozen=True)
class Transfer:
    """A transfer of funds, optionally invoking a contract function."""

    recipient: bytes
    amount: int
    gas_limit: int = 0
    gas_deposit: int = 0
    func_name: bytes = b""
    func_params: bytes = b""

    def __post_init__(self):
        if len(self.recipient) != RECIPIENT_SIZE:
            raise ValueError(f"recipient must be 32 bytes, got {len(self.recipient)}")
        for name in ("amount", "gas_limit", "gas_deposit"):
            value = getattr(self, name)
            if not 0 <= value <= 0xFFFFFFFFFFFFFFFF:
                raise ValueError(f"{name} out of uint64 range: {value}")

    @classmethod
    def to(cls, recipient: Union[str, bytes], amount: int, **kwargs) -> Transfer:
        """Build a transfer to a recipient given as hex or raw bytes."""
        if isinstance(recipient, str):
            recipient = bytes.fromhex(recipient)
        func_name = kwargs.pop("func_name", b"")
        if isinstance(func_name, str):
            func_name = func_name.encode("utf-8")
        return cls(recipient=recipient, amount=amount, func_name=func_name, **kwargs)

    @property
    def is_call(self) -> bool:
        return self.gas_limit > 0 or len(self.func_name) > 0

    def marshal(self) -> bytes:
        out = bytearray(self.recipient)
        out += struct.pack("<Q", self.amount)

        if self.is_call:
            out += struct.pack("<Q", self.gas_limit)
            out += struct.pack("<Q", self.gas_deposit)
            out += struct.pack("<I", len(self.func_name))
            out += self.func_name
            out += struct.pack("<I", len(self.func_params))
            out += self.func_params

        return bytes(out)
