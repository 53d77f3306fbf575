"""
Price provider package for the Electrack service.
Contains the provider contract and its implementations.
"""

from .base import ElectricityPriceProvider, StaticPriceProvider
from .factory import resolve_provider
from .tibber import TibberProvider

__all__ = [
    "ElectricityPriceProvider",
    "StaticPriceProvider",
    "TibberProvider",
    "resolve_provider",
]
