"""
Wire encoding for wctl.
"""

from .wire import Transaction, TransactionList, TxRequest, TxResponse, parse_json

__all__ = [
    "Transaction",
    "TransactionList",
    "TxRequest",
    "TxResponse",
    "parse_json",
]
