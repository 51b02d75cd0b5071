"""Custody — граница с внешним ledger-токеном (pull в custody, push из custody)."""

from .adapter import CustodyAdapter
from .in_memory import InMemoryCustody

__all__ = [
    "CustodyAdapter",
    "InMemoryCustody",
]
