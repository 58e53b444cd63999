"""
Wire codec tests.

Transaction decoding is lenient field by field; list decoding is all or
nothing; request encoding is strict.
"""

import json

import pytest

from wctl.codec.wire import Transaction, TransactionList, TxRequest, TxResponse
from wctl.runtime.errors import DecodeError


FULL_TX = {
    "id": "aa11",
    "sender": "bb22",
    "creator": "cc33",
    "parents": ["p1", "p2", "p3"],
    "timestamp": 1700000000,
    "tag": 1,
    "payload": "deadbeef",
    "accounts_root": "dd44",
    "sender_signature": "ee55",
    "creator_signature": "ff66",
    "depth": 42,
}


class TestTransactionDecode:

    def test_full_object(self):
        tx = Transaction.from_json(json.dumps(FULL_TX))

        assert tx.id == "aa11"
        assert tx.sender == "bb22"
        assert tx.creator == "cc33"
        assert tx.parents == ("p1", "p2", "p3")
        assert tx.timestamp == 1700000000
        assert tx.tag == 1
        assert tx.payload == bytes.fromhex("deadbeef")
        assert tx.accounts_root == "dd44"
        assert tx.sender_signature == "ee55"
        assert tx.creator_signature == "ff66"
        assert tx.depth == 42

    def test_missing_parents_is_empty(self):
        data = dict(FULL_TX)
        del data["parents"]

        tx = Transaction.from_json(json.dumps(data))
        assert tx.parents == ()

    def test_empty_object_is_zero_value(self):
        assert Transaction.from_json("{}") == Transaction()

    def test_parents_keep_document_order(self):
        parents = [f"p{i}" for i in range(20, 0, -1)]
        tx = Transaction.from_json(json.dumps({"parents": parents}))
        assert list(tx.parents) == parents

    def test_wrong_types_decode_to_zero(self):
        tx = Transaction.from_json(json.dumps({
            "id": 5, "timestamp": "soon", "depth": -1, "tag": True, "parents": "p1", "payload": 12,
        }))
        assert tx.id == ""
        assert tx.timestamp == 0
        assert tx.depth == 0
        assert tx.tag == 0
        assert tx.parents == ()
        assert tx.payload == b""

    def test_tag_truncated_to_byte(self):
        assert Transaction.from_json('{"tag": 257}').tag == 1

    def test_non_hex_payload_kept_as_bytes(self):
        assert Transaction.from_json('{"payload": "hello"}').payload == b"hello"

    @pytest.mark.parametrize("raw", ["ab cd", " abcd", "abc", "ab\ncd", "zz"])
    def test_payload_that_is_not_strict_hex_kept_verbatim(self, raw):
        tx = Transaction.from_json(json.dumps({"payload": raw}))
        assert tx.payload == raw.encode("utf-8")

    def test_uppercase_hex_payload_decoded(self):
        assert Transaction.from_json('{"payload": "ABCD"}').payload == b"\xab\xcd"

    def test_accepts_bytes_input(self):
        assert Transaction.from_json(b'{"id": "x"}').id == "x"

    def test_malformed_json_fails(self):
        with pytest.raises(DecodeError):
            Transaction.from_json('{"id": ')

    def test_non_object_fails(self):
        with pytest.raises(DecodeError):
            Transaction.from_json("[1, 2]")

    def test_immutable(self):
        tx = Transaction.from_json(json.dumps(FULL_TX))
        with pytest.raises(AttributeError):
            tx.id = "other"


class TestTransactionListDecode:

    def test_decodes_every_element(self):
        items = [dict(FULL_TX, id="a"), {"id": "b"}, {}]
        txs = TransactionList.from_json(json.dumps(items))

        assert [tx.id for tx in txs] == ["a", "b", ""]
        assert txs[0].parents == ("p1", "p2", "p3")

    def test_empty_array(self):
        assert TransactionList.from_json("[]") == []

    def test_non_array_leaves_destination_unchanged(self):
        dest = TransactionList([Transaction(id="keep")])

        with pytest.raises(DecodeError):
            dest.unmarshal_json('{"id": "x"}')

        assert [tx.id for tx in dest] == ["keep"]

    def test_malformed_json_leaves_destination_unchanged(self):
        dest = TransactionList([Transaction(id="keep")])

        with pytest.raises(DecodeError):
            dest.unmarshal_json("[{")

        assert [tx.id for tx in dest] == ["keep"]

    def test_bad_element_aborts_whole_list(self):
        dest = TransactionList([Transaction(id="keep")])

        with pytest.raises(DecodeError):
            dest.unmarshal_json('[{"id": "a"}, 3, {"id": "c"}]')

        assert [tx.id for tx in dest] == ["keep"]

    def test_success_replaces_not_appends(self):
        dest = TransactionList([Transaction(id="old")])
        dest.unmarshal_json('[{"id": "new"}]')
        assert [tx.id for tx in dest] == ["new"]


class TestTxResponseDecode:

    def test_full(self):
        resp = TxResponse.from_json(json.dumps({
            "tx_id": "abc", "parent_ids": ["x", "y"], "is_critical": True,
        }))
        assert resp == TxResponse(tx_id="abc", parent_ids=("x", "y"), is_critical=True)

    def test_missing_fields(self):
        assert TxResponse.from_json("{}") == TxResponse()

    def test_malformed(self):
        with pytest.raises(DecodeError):
            TxResponse.from_json("nope")


class TestTxRequestEncode:

    def test_wire_shape(self):
        req = TxRequest.create(sender=b"\xab" * 32, tag=255, payload=b"\x01\x02", signature=b"\xcd" * 64)
        value = json.loads(req.to_json())

        assert value == {
            "sender": "ab" * 32,
            "tag": 255,
            "payload": "0102",
            "signature": "cd" * 64,
        }
        assert isinstance(value["tag"], int)

    def test_hex_is_lowercase(self):
        req = TxRequest.create(sender=b"\xAB", tag=0, payload=b"\xEF", signature=b"\xCD")
        assert req.payload == "ef"
        assert req.to_json() == req.to_json().lower()

    @pytest.mark.parametrize("tag", [-1, 256, "1", 1.0, True])
    def test_invalid_tag_rejected(self, tag):
        req = TxRequest(sender="aa", tag=tag, payload="", signature="bb")
        with pytest.raises(ValueError):
            req.to_json()

    def test_uppercase_hex_rejected(self):
        req = TxRequest(sender="AA", tag=1, payload="", signature="bb")
        with pytest.raises(ValueError):
            req.to_json()

    def test_payload_survives_server_side_decode(self):
        payload = bytes(range(256))
        req = TxRequest.create(sender=b"\x01" * 32, tag=9, payload=payload, signature=b"\x02" * 64)

        tx = Transaction.from_json(req.to_json())

        assert tx.tag == 9
        assert tx.payload == payload
        assert tx.sender == "01" * 32
