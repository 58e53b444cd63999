"""
Wire codec for the hot-path record types.

Responses are parsed into a plain JSON value tree and then read field by
field. A missing field, or a field of the wrong JSON type, decodes to the zero
value of its target instead of failing: nodes are free to omit fields. Only
structurally invalid JSON fails a decode.

The request encoder is strict. Its output must match the node's decoder
exactly, so a bad value is a programming error and raises ``ValueError``.
"""

from __future__ import annotations
import binascii
import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Tuple, Union

from ..runtime.errors import DecodeError

JSONInput = Union[str, bytes, bytearray]


def parse_json(data: JSONInput) -> Any:
    """
    Parse raw JSON into a value tree.

    Raises:
        DecodeError: If the input is not valid JSON
    """
    try:
        return json.loads(data)
    except (ValueError, UnicodeDecodeError) as e:
        raise DecodeError(f"Invalid JSON: {e}", cause=e) from e


def _require_object(value: Any, what: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise DecodeError(f"{what} must be a JSON object, got {type(value).__name__}")
    return value


# Field readers. Each returns the zero value when the key is missing or holds
# a value of the wrong JSON type.

def get_str(obj: Dict[str, Any], key: str) -> str:
    value = obj.get(key)
    return value if isinstance(value, str) else ""


def get_uint(obj: Dict[str, Any], key: str) -> int:
    value = obj.get(key)
    if isinstance(value, bool):
        return 0
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, int) and value >= 0:
        return value
    return 0


def get_bool(obj: Dict[str, Any], key: str) -> bool:
    value = obj.get(key)
    return value if isinstance(value, bool) else False


def get_str_list(obj: Dict[str, Any], key: str) -> Tuple[str, ...]:
    """Read an array in document order; non-string items keep their JSON text."""
    value = obj.get(key)
    if not isinstance(value, list):
        return ()
    return tuple(
        item if isinstance(item, str) else json.dumps(item, separators=(",", ":"))
        for item in value
    )


def get_payload(obj: Dict[str, Any], key: str) -> bytes:
    """
    Read a byte field sent as a string.

    Strict hex strings (even length, hex digits only) are decoded. Any other
    string, including one with whitespace, is taken as its UTF-8 bytes.
    """
    value = obj.get(key)
    if not isinstance(value, str):
        return b""
    try:
        return binascii.unhexlify(value)
    except (binascii.Error, ValueError):
        return value.encode("utf-8")


@dataclass(frozen=True)
class Transaction:
    """A transaction as reported by the node."""

    id: str = ""
    sender: str = ""
    creator: str = ""
    parents: Tuple[str, ...] = ()
    timestamp: int = 0
    tag: int = 0
    payload: bytes = b""
    accounts_root: str = ""
    sender_signature: str = ""
    creator_signature: str = ""
    depth: int = 0

    @classmethod
    def from_value(cls, value: Any) -> Transaction:
        """Build a transaction from an already parsed JSON object."""
        obj = _require_object(value, "transaction")
        return cls(
            id=get_str(obj, "id"),
            sender=get_str(obj, "sender"),
            creator=get_str(obj, "creator"),
            parents=get_str_list(obj, "parents"),
            timestamp=get_uint(obj, "timestamp"),
            tag=get_uint(obj, "tag") & 0xFF,
            payload=get_payload(obj, "payload"),
            accounts_root=get_str(obj, "accounts_root"),
            sender_signature=get_str(obj, "sender_signature"),
            creator_signature=get_str(obj, "creator_signature"),
            depth=get_uint(obj, "depth"),
        )

    @classmethod
    def from_json(cls, data: JSONInput) -> Transaction:
        return cls.from_value(parse_json(data))


class TransactionList(list):
    """
    A list of transactions decoded from a JSON array.

    ``unmarshal_json`` replaces the contents only once the whole array has
    decoded; on failure the list keeps its previous contents.
    """

    def __init__(self, items: Iterable[Transaction] = ()):
        super().__init__(items)

    def unmarshal_json(self, data: JSONInput) -> None:
        value = parse_json(data)
        if not isinstance(value, list):
            raise DecodeError(f"transaction list must be a JSON array, got {type(value).__name__}")

        decoded = [Transaction.from_value(item) for item in value]
        self[:] = decoded

    @classmethod
    def from_json(cls, data: JSONInput) -> TransactionList:
        result = cls()
        result.unmarshal_json(data)
        return result


@dataclass(frozen=True)
class TxResponse:
    """Acknowledgment of a submitted transaction."""

    tx_id: str = ""
    parent_ids: Tuple[str, ...] = ()
    is_critical: bool = False

    @classmethod
    def from_value(cls, value: Any) -> TxResponse:
        obj = _require_object(value, "transaction response")
        return cls(
            tx_id=get_str(obj, "tx_id"),
            parent_ids=get_str_list(obj, "parent_ids"),
            is_critical=get_bool(obj, "is_critical"),
        )

    @classmethod
    def from_json(cls, data: JSONInput) -> TxResponse:
        return cls.from_value(parse_json(data))


def _check_hex(name: str, value: str) -> None:
    if value != value.lower():
        raise ValueError(f"{name} must be lowercase hex")
    try:
        binascii.unhexlify(value)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"{name} must be hex: {e}") from e


@dataclass
class TxRequest:
    """Outbound transaction submission body."""

    sender: str
    tag: int
    payload: str
    signature: str = field(default="")

    @classmethod
    def create(cls, sender: bytes, tag: int, payload: bytes, signature: bytes) -> TxRequest:
        """Build a request from raw bytes, hex-encoding each field."""
        return cls(
            sender=bytes(sender).hex(),
            tag=tag,
            payload=bytes(payload).hex(),
            signature=bytes(signature).hex(),
        )

    def to_value(self) -> Dict[str, Any]:
        """
        Return the JSON object sent to the node.

        Raises:
            ValueError: If a field would not match the node's decoder
        """
        if isinstance(self.tag, bool) or not isinstance(self.tag, int) or not 0 <= self.tag <= 0xFF:
            raise ValueError(f"tag must be an integer in [0, 255], got {self.tag!r}")
        _check_hex("sender", self.sender)
        _check_hex("payload", self.payload)
        _check_hex("signature", self.signature)

        return {
            "sender": self.sender,
            "tag": self.tag,
            "payload": self.payload,
            "signature": self.signature,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_value(), separators=(",", ":"))
