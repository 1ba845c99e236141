"""
Tests for the human-readable trip breakdown.
"""

import sys
from datetime import timedelta
from pathlib import Path

import pytest

# Add both tests dir and parent dir to path
sys.path.insert(0, str(Path(__file__).parent))
sys.path.insert(0, str(Path(__file__).parent.parent))

from helpers import START, make_request
from drivetime.breakdown import describe_drive, render_breakdown
from drivetime.scheduling import ReducedRestTracker, schedule_trip
from drivetime.time_math import format_hours
from drivetime.types import DelayEvent, FerryEvent, ScheduleResult, Segment, Settings


class TestFormatHours:
    """Hours-minutes formatting."""

    @pytest.mark.parametrize(
        "hours,expected",
        [
            (0.75, "0h 45m"),
            (4.5, "4h 30m"),
            (11, "11h 00m"),
            (5.25, "5h 15m"),
            (2 / 3, "0h 40m"),
        ],
    )
    def test_format(self, hours, expected):
        assert format_hours(hours) == expected


class TestSegmentText:
    """Segment steps for a plain single-driver trip."""

    @pytest.fixture
    def breakdown(self):
        request = make_request(total_drive_hours=20)
        return render_breakdown(schedule_trip(request), request)

    def test_step_order(self, breakdown):
        kinds = [step.kind for step in breakdown.steps]
        assert kinds == ["segment", "rest", "segment", "rest", "segment"]

    def test_first_segment(self, breakdown):
        assert breakdown.steps[0].text == (
            "Segment 1:\n"
            "Start at 00:00.\n"
            "Drive 4h 30m, 45m break, then drive 4h 30m, covering 720.00 km\n"
            "(in-shift break 0h 45m)\n"
            "End work at 09:45."
        )

    def test_last_segment_says_end_at(self, breakdown):
        assert breakdown.steps[-1].text == (
            "Segment 3:\nStart at 17:30.\nDrive 2h 00m, covering 160.00 km\nEnd at 19:30."
        )

    def test_daily_rest_line(self, breakdown):
        rest = breakdown.steps[1]
        assert rest.text == "Daily rest: 11h 00m from 09:45 to 20:45."
        assert rest.rest_index == 1
        assert rest.reducible

    def test_totals(self, breakdown):
        assert breakdown.final_arrival == "2023-01-02 19:30"
        assert breakdown.total_trip_hours == 43.5
        assert breakdown.total_distance_km == 1600
        assert breakdown.warnings == []


class TestDelayText:
    """Delays, off-duty waits and ferry rests."""

    def test_off_duty_wait_follows_segment(self):
        request = make_request(
            total_drive_hours=10,
            ferry_event=FerryEvent(segment_index=1, delay_hours=7),
            settings=Settings(auto_ferry_rest=False),
        )
        breakdown = render_breakdown(schedule_trip(request), request)

        assert [s.kind for s in breakdown.steps] == ["segment", "off_duty_wait", "rest", "segment"]
        assert (
            "(in-shift break 0h 45m; on-duty delay 5h 15m (ferry 7.00h); "
            "off-duty delay 1h 45m (ferry 7.00h))"
        ) in breakdown.steps[0].text
        assert breakdown.steps[0].text.endswith("End work at 15:00.")
        assert breakdown.steps[1].text == "Off-duty wait: 1h 45m from 15:00 to 16:45."
        assert breakdown.steps[2].text == "Daily rest: 11h 00m from 16:45 to 03:45."

    def test_ferry_rest_label(self):
        request = make_request(
            total_drive_hours=10,
            ferry_event=FerryEvent(segment_index=1, delay_hours=7),
        )
        breakdown = render_breakdown(schedule_trip(request), request)

        assert breakdown.steps[1].kind == "rest"
        assert breakdown.steps[1].text == "Daily rest (ferry as rest): 11h 00m from 09:45 to 20:45."

    def test_two_driver_drive_text(self):
        request = make_request(
            total_drive_hours=30,
            driver_type="two",
            default_available_hours=18,
            first_segment_available_hours=18,
            refuel_events=[DelayEvent(segment_index=1, delay_hours=2)],
        )
        breakdown = render_breakdown(schedule_trip(request), request)

        text = breakdown.steps[0].text
        assert "Drive 16.00h, covering 1280.00 km" in text
        assert "(on-duty delay 2h 00m (refuel 2.00h))" in text

    def test_delay_only_segment(self):
        request = make_request(total_drive_hours=5)
        segment = Segment(
            index=1,
            start=START,
            end=START + timedelta(hours=2),
            drive_hours=0,
            delay_on_duty=0,
            delay_off_duty=2,
            in_shift_break=0,
            delay_notes=("refuel 2.00h",),
        )
        result = ScheduleResult(
            start_time=START, segments=[segment], rests=[], final_time=segment.end
        )

        breakdown = render_breakdown(result, request)

        assert breakdown.steps[0].text == (
            "Segment 1:\nStart at 00:00.\nDelay-only (Extra: refuel 2.00h)\nEnd at 02:00."
        )

    def test_no_rest_after_scheduled_delay_only_segment(self):
        request = make_request(
            total_drive_hours=20,
            driver_type="two",
            default_available_hours=18,
            first_segment_available_hours=2,
            ferry_event=FerryEvent(segment_index=1, delay_hours=5),
            settings=Settings(auto_ferry_rest=False),
        )

        breakdown = render_breakdown(schedule_trip(request), request)

        kinds = [(step.kind, step.segment_index or step.rest_index) for step in breakdown.steps]
        assert kinds == [("segment", 1), ("segment", 2), ("rest", 1), ("segment", 3)]
        assert breakdown.steps[0].text == (
            "Segment 1:\nStart at 00:00.\nDelay-only (Extra: ferry 5.00h)\nEnd at 05:00."
        )
        assert breakdown.steps[1].text.startswith("Segment 2:\nStart at 05:00.")
        assert breakdown.steps[2].text == "Daily rest: 11h 00m from 21:00 to 08:00."


class TestReducibleRests:
    """Rest reduction offer is based on structured rest data."""

    def test_reduced_rest_is_not_reducible(self):
        tracker = ReducedRestTracker()
        tracker.reduce(1)
        request = make_request(pick_daily_rest=tracker.pick_daily_rest)

        breakdown = render_breakdown(schedule_trip(request), request, tracker=tracker)
        rests = [s for s in breakdown.steps if s.kind == "rest"]

        assert rests[0].text.startswith("Daily rest: 9h 00m")
        assert not rests[0].reducible
        assert rests[1].reducible

    def test_nothing_reducible_once_allowance_used(self):
        tracker = ReducedRestTracker(used_this_week=2)
        request = make_request(pick_daily_rest=tracker.pick_daily_rest)

        breakdown = render_breakdown(schedule_trip(request), request, tracker=tracker)

        assert not any(s.reducible for s in breakdown.steps)


class TestLocalTimes:
    """Displayed times follow the requested timezone."""

    def test_times_shown_in_local_zone(self):
        request = make_request(total_drive_hours=4)
        breakdown = render_breakdown(schedule_trip(request), request, "Europe/Vilnius")

        # Vilnius is UTC+2 in winter
        assert breakdown.steps[0].text.startswith("Segment 1:\nStart at 02:00.")
        assert breakdown.final_arrival == "2023-01-01 06:00"

    def test_describe_drive_short_single(self):
        segment = Segment(
            index=1,
            start=START,
            end=START + timedelta(hours=3),
            drive_hours=3,
            delay_on_duty=0,
            delay_off_duty=0,
            in_shift_break=0,
        )
        assert describe_drive(segment, is_single=True) == "Drive 3h 00m"
