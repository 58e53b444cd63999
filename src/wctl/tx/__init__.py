"""
Transaction building for wctl.
"""

from .transfer import Tag, Transfer, Marshalable
from .builder import TransactionBuilder

__all__ = [
    "Tag",
    "Transfer",
    "Marshalable",
    "TransactionBuilder",
]
