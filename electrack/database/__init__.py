"""
Database package for the Electrack service.
Contains the price store contract and its implementations.
"""

from .base import PriceStore
from .memory import InMemoryPriceStore
from .service import PostgresPriceStore

__all__ = [
    "InMemoryPriceStore",
    "PostgresPriceStore",
    "PriceStore",
]
