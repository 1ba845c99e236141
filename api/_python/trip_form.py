"""
Trip form handling.

Validates the raw calculator form (JSON from the UI or a request file),
builds a TripRequest, and runs the full calculate -> render pipeline.
"""

from dataclasses import asdict, replace
from typing import Any

from drivetime.breakdown import render_breakdown
from drivetime.scheduling import ReducedRestTracker, schedule_trip
from drivetime.scheduling.rest_policy import MAX_REDUCED_RESTS_PER_WEEK
from drivetime.time_math import (
    get_current_datetime_in_tz,
    is_valid_timezone,
    localize_start_time,
)
from drivetime.types import (
    DEFAULT_AVAILABLE_HOURS,
    DelayEvent,
    FerryEvent,
    Settings,
    TripRequest,
)

# Form limits
MAX_REFUELS = 10
REFUEL_DELAY_HOURS = 1.0  # Each refuel stop is a fixed 1h delay


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int_list(value: Any) -> bool:
    return isinstance(value, list) and all(
        isinstance(v, int) and not isinstance(v, bool) for v in value
    )


def validate_start_time(value: str) -> bool:
    """Validate ISO datetime format like '2026-01-06T09:45'."""
    if not isinstance(value, str) or len(value) < 16:
        return False
    try:
        localize_start_time(value, "UTC")
    except ValueError:
        return False
    return True


def validate_trip_form(data: dict[str, Any]) -> str | None:
    """Validate form data, return error message or None if valid."""
    for name in ("distance_km", "speed_kmh"):
        if name not in data:
            return f"Missing required field: {name}"
        if not _is_number(data[name]) or data[name] <= 0:
            return "Please enter valid values for distance and speed."

    driver_type = data.get("driver_type", "single")
    if driver_type not in DEFAULT_AVAILABLE_HOURS:
        return f"Invalid driver type: {driver_type}"

    custom_hours = data.get("custom_hours")
    if custom_hours is not None and not _is_number(custom_hours):
        return "custom_hours must be a number"

    refuels = data.get("refuel_segments", [])
    if not _is_int_list(refuels):
        return "refuel_segments must be a list of segment numbers"
    if len(refuels) > MAX_REFUELS:
        return f"At most {MAX_REFUELS} refuel stops are supported"

    ferry_minutes = data.get("ferry_minutes", 0)
    if not _is_number(ferry_minutes) or ferry_minutes < 0:
        return "ferry_minutes must be a non-negative number"

    ferry_segment = data.get("ferry_segment", 1)
    if not isinstance(ferry_segment, int) or isinstance(ferry_segment, bool):
        return "ferry_segment must be a segment number"

    if not isinstance(data.get("auto_ferry_rest", True), bool):
        return "auto_ferry_rest must be true or false"

    tz_name = data.get("timezone", "UTC")
    if not isinstance(tz_name, str) or not is_valid_timezone(tz_name):
        return f"Invalid timezone: {tz_name}"

    start_time = data.get("start_time")
    if start_time is not None and not validate_start_time(start_time):
        return f"Invalid start time format: {start_time}"

    reduced = data.get("reduced_rests", [])
    if not _is_int_list(reduced) or any(i < 1 for i in reduced):
        return "reduced_rests must be a list of rest numbers"

    used = data.get("weekly_reductions_used", 0)
    if (
        not isinstance(used, int)
        or isinstance(used, bool)
        or not 0 <= used <= MAX_REDUCED_RESTS_PER_WEEK
    ):
        return f"weekly_reductions_used must be between 0 and {MAX_REDUCED_RESTS_PER_WEEK}"

    settings = data.get("settings")
    if settings is not None:
        if not isinstance(settings, dict):
            return "settings must be an object"
        try:
            Settings.from_dict(settings)
        except (ValueError, TypeError, AttributeError) as e:
            return f"Invalid settings: {e}"

    return None


def build_tracker(data: dict[str, Any]) -> ReducedRestTracker:
    """
    Rebuild the caller's reduced-rest state from the form.

    `weekly_reductions_used` counts reductions spent earlier in the week,
    outside this trip; `reduced_rests` lists this trip's rests to shorten.
    Reductions beyond the weekly allowance are ignored.
    """
    tracker = ReducedRestTracker(used_this_week=data.get("weekly_reductions_used", 0))
    for rest_index in data.get("reduced_rests", []):
        tracker.reduce(rest_index)
    return tracker


def build_trip_request(
    data: dict[str, Any], tracker: ReducedRestTracker | None = None
) -> TripRequest:
    """
    Build a TripRequest from validated form data.

    Raises:
        ValueError: If the form does not validate
    """
    error = validate_trip_form(data)
    if error:
        raise ValueError(error)

    driver_type = data.get("driver_type", "single")
    default_available = DEFAULT_AVAILABLE_HOURS[driver_type]

    # Custom hours only ever shorten day 1
    custom_hours = data.get("custom_hours")
    first_available = default_available
    if custom_hours is not None and 0 < custom_hours < default_available:
        first_available = float(custom_hours)

    refuel_events = [
        DelayEvent(segment_index=max(1, segment), delay_hours=REFUEL_DELAY_HOURS)
        for segment in data.get("refuel_segments", [])
    ]

    ferry_event = None
    ferry_hours = data.get("ferry_minutes", 0) / 60
    if ferry_hours > 0:
        ferry_event = FerryEvent(
            segment_index=max(1, data.get("ferry_segment", 1)),
            delay_hours=ferry_hours,
        )

    settings = Settings.from_dict(data.get("settings"))
    if "auto_ferry_rest" in data:
        settings = replace(settings, auto_ferry_rest=data["auto_ferry_rest"])

    tz_name = data.get("timezone", "UTC")
    if data.get("start_time"):
        start_time = localize_start_time(data["start_time"], tz_name)
    else:
        start_time = get_current_datetime_in_tz(tz_name)

    request = TripRequest(
        total_drive_hours=data["distance_km"] / data["speed_kmh"],
        driver_type=driver_type,
        speed_kmh=float(data["speed_kmh"]),
        start_time=start_time,
        default_available_hours=default_available,
        first_segment_available_hours=first_available,
        refuel_events=refuel_events,
        ferry_event=ferry_event,
        settings=settings,
    )
    if tracker is not None:
        request = replace(request, pick_daily_rest=tracker.pick_daily_rest)
    return request


def calculate_trip(data: dict[str, Any]) -> dict[str, Any]:
    """
    Run the calculator for one form submission.

    Returns a JSON-ready dict with the breakdown, trip totals, structured
    segments/rests and the reduced-rest counter after this run.

    Raises:
        ValueError: If the form does not validate
    """
    error = validate_trip_form(data)
    if error:
        raise ValueError(error)

    tracker = build_tracker(data)
    request = build_trip_request(data, tracker)
    result = schedule_trip(request)
    breakdown = render_breakdown(result, request, data.get("timezone", "UTC"), tracker)

    return {
        "start_time": result.start_time.isoformat(),
        "final_time": result.final_time.isoformat(),
        "final_arrival": breakdown.final_arrival,
        "total_trip_hours": breakdown.total_trip_hours,
        "total_distance_km": breakdown.total_distance_km,
        "steps": [asdict(step) for step in breakdown.steps],
        "segments": [
            {
                "index": s.index,
                "start": s.start.isoformat(),
                "end": s.end.isoformat(),
                "drive_hours": s.drive_hours,
                "delay_on_duty": s.delay_on_duty,
                "delay_off_duty": s.delay_off_duty,
                "in_shift_break": s.in_shift_break,
                "delay_notes": list(s.delay_notes),
                "distance_km": round(s.distance_km, 2),
            }
            for s in result.segments
        ],
        "rests": [
            {
                "index": r.index,
                "type": r.type,
                "start": r.start.isoformat(),
                "end": r.end.isoformat(),
                "duration_hours": r.duration_hours,
                "after_segment": r.after_segment,
            }
            for r in result.rests
        ],
        "reduced_rests": sorted(tracker.forced_rests),
        "weekly_reductions_used": tracker.used_this_week,
        "warnings": breakdown.warnings,
    }
