"""
Drivetime Trip ETA

Estimates arrival for road transport trips by splitting drive time into
duty segments with in-shift breaks, daily rests, refuel stops and ferry
crossings.

Main entry point: schedule_trip (TripScheduler)
"""

from .breakdown import BreakdownStep, TripBreakdown, render_breakdown
from .scheduling import (
    DelayResolution,
    ReducedRestTracker,
    TripScheduler,
    resolve_delays,
    schedule_trip,
)
from .types import (
    DelayEvent,
    DutyCaps,
    FerryEvent,
    Rest,
    ScheduleResult,
    Segment,
    Settings,
    TripRequest,
)

__all__ = [
    # Types
    "TripRequest",
    "DelayEvent",
    "FerryEvent",
    "Settings",
    "DutyCaps",
    "Segment",
    "Rest",
    "ScheduleResult",
    # Scheduler
    "TripScheduler",
    "schedule_trip",
    "DelayResolution",
    "resolve_delays",
    "ReducedRestTracker",
    # Rendering
    "BreakdownStep",
    "TripBreakdown",
    "render_breakdown",
]
