"""
Test helper functions for trip timeline validation.

These functions can be imported by test modules to check scheduler output.
"""

import sys
from datetime import datetime
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytz

from drivetime.types import ScheduleResult, Settings, TripRequest

TOLERANCE_HOURS = 1e-5

START = pytz.UTC.localize(datetime(2023, 1, 1, 0, 0))


def make_request(**overrides) -> TripRequest:
    """
    Build a TripRequest with calculator defaults.

    Defaults: 20h single-driver trip at 80 km/h starting 2023-01-01 00:00 UTC,
    9h segments, no delays, default settings.
    """
    defaults = dict(
        total_drive_hours=20.0,
        driver_type="single",
        speed_kmh=80.0,
        start_time=START,
        default_available_hours=9.0,
        first_segment_available_hours=9.0,
        refuel_events=[],
        ferry_event=None,
        settings=Settings(),
    )
    defaults.update(overrides)
    return TripRequest(**defaults)


def hours_after(start: datetime, dt: datetime) -> float:
    """Hours from start to dt."""
    return (dt - start).total_seconds() / 3600


def assert_duty_cap(result: ScheduleResult, duty_cap: float) -> None:
    """Every segment's on-duty time stays within the cap."""
    for seg in result.segments:
        duty = seg.drive_hours + seg.in_shift_break + seg.delay_on_duty
        assert duty <= duty_cap + TOLERANCE_HOURS, (
            f"Segment {seg.index} on duty {duty:.4f}h exceeds cap {duty_cap}h"
        )


def assert_carried_duty(result: ScheduleResult, duty_cap: float) -> None:
    """On-duty time summed between rests stays within the cap."""
    rested = {rest.after_segment for rest in result.rests}
    duty = 0.0
    for seg in result.segments:
        duty += seg.duty_hours
        assert duty <= duty_cap + TOLERANCE_HOURS, (
            f"Duty reaches {duty:.4f}h by segment {seg.index}, cap {duty_cap}h"
        )
        if seg.index in rested:
            duty = 0.0


def assert_conservation(result: ScheduleResult) -> None:
    """Segment wall-clock length equals the sum of its parts."""
    for seg in result.segments:
        expected = seg.drive_hours + seg.in_shift_break + seg.delay_on_duty + seg.delay_off_duty
        actual = hours_after(seg.start, seg.end)
        assert abs(actual - expected) < TOLERANCE_HOURS, (
            f"Segment {seg.index}: {actual:.4f}h elapsed vs {expected:.4f}h accounted"
        )


def assert_contiguous(result: ScheduleResult) -> None:
    """Segments and rests tile the trip with no gaps or overlaps."""
    rests_after = {rest.after_segment: rest for rest in result.rests}
    cursor = result.start_time
    for seg in result.segments:
        assert seg.start == cursor, f"Gap before segment {seg.index}"
        cursor = seg.end
        rest = rests_after.get(seg.index)
        if rest is not None:
            assert rest.start == cursor, f"Gap before rest {rest.index}"
            assert abs(hours_after(rest.start, rest.end) - rest.duration_hours) < TOLERANCE_HOURS
            cursor = rest.end
    assert result.final_time == cursor


def expected_notes(request: TripRequest, segment_index: int) -> list[str]:
    """Delay notes the given segment should carry."""
    notes = [
        f"refuel {e.delay_hours:.2f}h"
        for e in request.refuel_events
        if e.segment_index == segment_index
    ]
    ferry = request.ferry_event
    if ferry is not None and ferry.delay_hours > 0 and ferry.segment_index == segment_index:
        notes.append(f"ferry {ferry.delay_hours:.2f}h")
    return notes


def assert_valid_timeline(result: ScheduleResult, request: TripRequest) -> None:
    """Run every structural check against a scheduler result."""
    assert_duty_cap(result, request.duty_cap)
    assert_carried_duty(result, request.duty_cap)
    assert_conservation(result)
    assert_contiguous(result)

    assert [s.index for s in result.segments] == list(range(1, len(result.segments) + 1))
    assert [r.index for r in result.rests] == list(range(1, len(result.rests) + 1))
    # Every driving segment but the last is followed by a rest; delay-only
    # segments run straight into the next one
    rested = [r.after_segment for r in result.rests]
    assert rested == [s.index for s in result.segments[:-1] if not s.is_delay_only]
    assert not result.segments[-1].is_delay_only

    total_drive = sum(s.drive_hours for s in result.segments)
    assert abs(total_drive - request.total_drive_hours) < TOLERANCE_HOURS

    for seg in result.segments:
        assert list(seg.delay_notes) == expected_notes(request, seg.index)
        assert seg.drive_hours <= request.segment_ceiling(seg.index) + TOLERANCE_HOURS
