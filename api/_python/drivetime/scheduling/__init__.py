"""
Trip Scheduling Layer.

Modules:
- delay_resolver: Refuel/ferry delays per segment, ferry-as-rest decision
- trip_scheduler: Segment-by-segment timeline with duty caps and rests
- rest_policy: Caller-owned weekly reduced-rest tracking
"""

from .delay_resolver import DelayResolution, resolve_delays
from .rest_policy import MAX_REDUCED_RESTS_PER_WEEK, ReducedRestTracker
from .trip_scheduler import (
    TripScheduler,
    insert_daily_rest,
    insert_ferry_rest,
    schedule_trip,
)

__all__ = [
    "DelayResolution",
    "resolve_delays",
    "ReducedRestTracker",
    "MAX_REDUCED_RESTS_PER_WEEK",
    "TripScheduler",
    "insert_daily_rest",
    "insert_ferry_rest",
    "schedule_trip",
]
