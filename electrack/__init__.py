"""
Electrack - cheapest electricity time slot service.

Answers which contiguous block of hours within a time range has the lowest
average electricity price, for each requested duration.

Main components:
- Price store (PostgreSQL or in-memory) holding hourly price points per provider
- Availability gate that fetches today's prices from the provider once
- Window optimizer selecting the cheapest window per duration
- FastAPI routes exposing the time-slot lookup
"""

__version__ = "1.0.0"
