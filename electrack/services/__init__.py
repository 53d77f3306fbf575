"""
Services package for the Electrack service.
Contains the availability gate, window optimizer and time slot lookup.
"""

from .availability import AvailabilityGate, DayFills, GateState
from .time_slots import TimeSlotService
from .window_optimizer import cheapest_window

__all__ = [
    "AvailabilityGate",
    "DayFills",
    "GateState",
    "TimeSlotService",
    "cheapest_window",
]
