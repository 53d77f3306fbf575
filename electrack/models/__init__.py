"""
Data models package for the Electrack service.
Contains Pydantic models for price data and API responses.
"""

from .price import HealthResponse, PricePoint, PriceWindow, Provider

__all__ = [
    "HealthResponse",
    "PricePoint",
    "PriceWindow",
    "Provider",
]
