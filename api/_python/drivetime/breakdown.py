"""
Human-readable trip breakdown.

Turns a ScheduleResult into display steps. All branching is on structured
fields (segment delays, rest type and duration); nothing here feeds back
into scheduling.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

from .scheduling.rest_policy import ReducedRestTracker
from .time_math import format_datetime, format_hours, format_time, hours_to_timedelta, to_local
from .types import (
    CONTINUOUS_DRIVE_LIMIT_HOURS,
    STANDARD_DAILY_REST_HOURS,
    Rest,
    ScheduleResult,
    Segment,
    TripRequest,
)

StepKind = Literal["segment", "off_duty_wait", "rest"]


@dataclass
class BreakdownStep:
    """One line (possibly multi-line) of the breakdown."""

    kind: StepKind
    text: str
    segment_index: int | None = None
    rest_index: int | None = None
    reducible: bool = False  # Rest can still be shortened to 9h


@dataclass
class TripBreakdown:
    """Rendered trip, ready for display or JSON."""

    steps: list[BreakdownStep]
    final_arrival: str  # "YYYY-MM-DD HH:MM" local
    total_trip_hours: float
    total_distance_km: float
    timezone: str
    warnings: list[str] = field(default_factory=list)

    @property
    def lines(self) -> list[str]:
        return [step.text for step in self.steps]


def _local(dt: datetime, tz_name: str) -> str:
    return format_time(to_local(dt, tz_name))


def describe_drive(segment: Segment, is_single: bool) -> str:
    """Driving portion of a segment, e.g. "Drive 4h 30m, 45m break, then drive 4h 30m"."""
    drive = segment.drive_hours
    if not is_single:
        return f"Drive {drive:.2f}h"
    if drive > CONTINUOUS_DRIVE_LIMIT_HOURS:
        return (
            f"Drive {format_hours(CONTINUOUS_DRIVE_LIMIT_HOURS)}, 45m break, "
            f"then drive {format_hours(drive - CONTINUOUS_DRIVE_LIMIT_HOURS)}"
        )
    return f"Drive {format_hours(drive)}"


def _segment_steps(
    segment: Segment, is_single: bool, is_last: bool, tz_name: str
) -> list[BreakdownStep]:
    notes = ", ".join(segment.delay_notes)

    if segment.is_delay_only:
        extra = f" (Extra: {notes})" if notes else ""
        text = (
            f"Segment {segment.index}:\n"
            f"Start at {_local(segment.start, tz_name)}.\n"
            f"Delay-only{extra}\n"
            f"End at {_local(segment.end, tz_name)}."
        )
        return [BreakdownStep(kind="segment", text=text, segment_index=segment.index)]

    note_suffix = f" ({notes})" if notes else ""
    extras = []
    if segment.in_shift_break > 0:
        extras.append(f"in-shift break {format_hours(segment.in_shift_break)}")
    if segment.delay_on_duty > 0:
        extras.append(f"on-duty delay {format_hours(segment.delay_on_duty)}{note_suffix}")
    if segment.delay_off_duty > 0:
        extras.append(f"off-duty delay {format_hours(segment.delay_off_duty)}{note_suffix}")

    work_end = segment.start + hours_to_timedelta(segment.duty_hours)
    lines = [
        f"Segment {segment.index}:",
        f"Start at {_local(segment.start, tz_name)}.",
        f"{describe_drive(segment, is_single)}, covering {segment.distance_km:.2f} km",
    ]
    if extras:
        lines.append(f"({'; '.join(extras)})")
    lines.append(f"{'End at' if is_last else 'End work at'} {_local(work_end, tz_name)}.")

    steps = [BreakdownStep(kind="segment", text="\n".join(lines), segment_index=segment.index)]
    if segment.delay_off_duty > 0:
        steps.append(
            BreakdownStep(
                kind="off_duty_wait",
                text=(
                    f"Off-duty wait: {format_hours(segment.delay_off_duty)} "
                    f"from {_local(work_end, tz_name)} to {_local(segment.end, tz_name)}."
                ),
                segment_index=segment.index,
            )
        )
    return steps


def _rest_step(rest: Rest, tz_name: str, tracker: ReducedRestTracker | None) -> BreakdownStep:
    label = "Daily rest (ferry as rest)" if rest.type == "ferry" else "Daily rest"
    reducible = rest.duration_hours == STANDARD_DAILY_REST_HOURS and (
        tracker is None or tracker.can_reduce()
    )
    return BreakdownStep(
        kind="rest",
        text=(
            f"{label}: {format_hours(rest.duration_hours)} "
            f"from {_local(rest.start, tz_name)} to {_local(rest.end, tz_name)}."
        ),
        rest_index=rest.index,
        reducible=reducible,
    )


def render_breakdown(
    result: ScheduleResult,
    request: TripRequest,
    tz_name: str = "UTC",
    tracker: ReducedRestTracker | None = None,
) -> TripBreakdown:
    """
    Render a scheduled trip.

    Rests are placed after the segment they follow (Rest.after_segment).
    Delay-only segments usually have no rest after them.

    Args:
        result: Scheduler output
        request: The request that produced it (driver type for wording)
        tz_name: IANA timezone for displayed times
        tracker: Reduced-rest tracker; when given, rests are only marked
            reducible while weekly allowance remains

    Returns:
        TripBreakdown with ordered steps and trip totals
    """
    steps: list[BreakdownStep] = []
    last = len(result.segments) - 1
    rests_after = {rest.after_segment: rest for rest in result.rests}

    for position, segment in enumerate(result.segments):
        steps.extend(_segment_steps(segment, request.is_single, position == last, tz_name))
        rest = rests_after.get(segment.index)
        if rest is not None:
            steps.append(_rest_step(rest, tz_name, tracker))

    return TripBreakdown(
        steps=steps,
        final_arrival=format_datetime(to_local(result.final_time, tz_name)),
        total_trip_hours=round(result.total_hours, 2),
        total_distance_km=round(result.total_distance_km, 2),
        timezone=tz_name,
        warnings=list(result.warnings),
    )
