"""
API package for the Electrack service.
Contains FastAPI route handlers and API-related utilities.
"""

from .routes import router

__all__ = [
    "router",
]
