"""
Scheduler package for the Electrack service.
Contains the background price prefetch.
"""

from .simple_scheduler import PrefetchScheduler

__all__ = [
    "PrefetchScheduler",
]
