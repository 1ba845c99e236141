"""
Trip segmentation.

Splits the total drive time into duty segments separated by rests:

1. Each segment gets a drive-time ceiling (reduced on day 1 if requested)
2. Single drivers get a 45 min break once driving exceeds 4.5h
3. Refuel/ferry delays stay off-duty unless there is headroom under the
   duty cap, in which case they are pulled on-duty to fill it
4. Driving is trimmed so a segment never exceeds the duty cap
5. A daily rest follows every driving segment except the last; a long
   enough ferry crossing takes the place of that rest. A delay-only segment
   is followed directly by the next one, carrying its on-duty time
"""

import logging

from ..time_math import hours_to_timedelta
from ..types import (
    CONTINUOUS_DRIVE_LIMIT_HOURS,
    IN_SHIFT_BREAK_HOURS,
    Rest,
    RestPolicy,
    RestType,
    ScheduleResult,
    ScheduleState,
    Segment,
    TripRequest,
)
from .delay_resolver import DelayResolution, resolve_delays

LOGGER = logging.getLogger(__name__)


def in_shift_break_for(planned_drive: float, is_single: bool) -> float:
    """Break needed within a segment of the given drive time."""
    if is_single and planned_drive > CONTINUOUS_DRIVE_LIMIT_HOURS:
        return IN_SHIFT_BREAK_HOURS
    return 0.0


def _insert_rest(state: ScheduleState, rest_type: RestType, pick_daily_rest: RestPolicy) -> Rest:
    state.rest_count += 1
    length = pick_daily_rest(state.rest_count)
    start = state.current_time
    end = start + hours_to_timedelta(length)

    rest = Rest(
        index=state.rest_count,
        type=rest_type,
        start=start,
        end=end,
        duration_hours=length,
        after_segment=state.segment_index,
    )
    state.rests.append(rest)
    state.current_time = end
    state.duty_used = 0.0

    LOGGER.debug("Rest %d (%s): %.2fh from %s", rest.index, rest_type, length, start)
    return rest


def insert_daily_rest(state: ScheduleState, pick_daily_rest: RestPolicy) -> Rest:
    """Append a daily rest, advance the clock and reset duty."""
    return _insert_rest(state, "daily", pick_daily_rest)


def insert_ferry_rest(state: ScheduleState, pick_daily_rest: RestPolicy) -> Rest:
    """Append a rest taken on a qualifying ferry crossing."""
    return _insert_rest(state, "ferry", pick_daily_rest)


class TripScheduler:
    """
    Segment-by-segment trip scheduler.

    Stateless between runs: every call to `schedule` builds its own
    ScheduleState, so one instance can be shared freely.
    """

    def schedule(self, request: TripRequest) -> ScheduleResult:
        """
        Build the full segment/rest timeline for a trip.

        Args:
            request: Validated TripRequest (drive time and speed > 0)

        Returns:
            ScheduleResult with segments, rests and final arrival time
        """
        state = ScheduleState(
            current_time=request.start_time,
            remaining_drive=request.total_drive_hours,
        )

        while state.remaining_drive > 0:
            state.segment_index += 1
            delays = resolve_delays(
                state.segment_index,
                request.refuel_events,
                request.ferry_event,
                request.settings,
            )

            segment = self._run_segment(state, request, delays)

            if state.remaining_drive > 0:
                if delays.ferry_as_rest:
                    insert_ferry_rest(state, request.pick_daily_rest)
                elif not segment.is_delay_only:
                    insert_daily_rest(state, request.pick_daily_rest)
                # After a delay-only segment the next one starts straight away
                # and duty_used carries over

        return ScheduleResult(
            start_time=request.start_time,
            segments=state.segments,
            rests=state.rests,
            final_time=state.current_time,
            warnings=self._check_rules(state.segments, request.duty_cap),
        )

    def _run_segment(
        self, state: ScheduleState, request: TripRequest, delays: DelayResolution
    ) -> Segment:
        """Plan and append one segment, advancing the clock and duty counter."""
        ceiling = request.segment_ceiling(state.segment_index)
        duty_cap = request.duty_cap

        planned_drive = min(ceiling, state.remaining_drive)
        in_shift_break = in_shift_break_for(planned_drive, request.is_single)

        counted_delay = 0.0
        off_duty_delay = 0.0

        # A ferry crossing that replaces the rest swallows the segment's delay
        absorbed_delay = 0.0 if delays.ferry_as_rest else delays.extra_delay

        would_be = state.duty_used + planned_drive + in_shift_break
        if would_be > duty_cap:
            overflow = would_be - duty_cap
            planned_drive = max(0.0, planned_drive - overflow)
            # Break is re-checked but driving is not trimmed again;
            # _check_rules reports any segment left over the cap
            in_shift_break = in_shift_break_for(planned_drive, request.is_single)
            off_duty_delay = absorbed_delay
        else:
            counted_delay = min(absorbed_delay, duty_cap - would_be)
            off_duty_delay = absorbed_delay - counted_delay

        # Two drivers cannot work through delay to stretch the ceiling
        if not request.is_single:
            planned_drive = min(
                planned_drive,
                max(0.0, ceiling - counted_delay),
                state.remaining_drive,
            )

        if planned_drive == 0 and (counted_delay > 0 or off_duty_delay > 0):
            segment = self._append_segment(
                state, request, delays, 0.0, 0.0, counted_delay, off_duty_delay
            )
            LOGGER.debug("Segment %d: delay only (%.2fh)", segment.index, counted_delay + off_duty_delay)
            return segment

        segment = self._append_segment(
            state, request, delays, planned_drive, in_shift_break, counted_delay, off_duty_delay
        )
        state.remaining_drive -= planned_drive

        LOGGER.debug(
            "Segment %d: drive %.2fh, break %.2fh, on-duty delay %.2fh, off-duty delay %.2fh",
            segment.index,
            planned_drive,
            in_shift_break,
            counted_delay,
            off_duty_delay,
        )
        return segment

    def _append_segment(
        self,
        state: ScheduleState,
        request: TripRequest,
        delays: DelayResolution,
        drive: float,
        in_shift_break: float,
        counted_delay: float,
        off_duty_delay: float,
    ) -> Segment:
        start = state.current_time

        # On-duty time first, then the off-duty wait (wall clock only)
        on_duty = drive + in_shift_break + counted_delay
        state.current_time = start + hours_to_timedelta(on_duty)
        state.duty_used += on_duty
        state.current_time += hours_to_timedelta(off_duty_delay)

        segment = Segment(
            index=state.segment_index,
            start=start,
            end=state.current_time,
            drive_hours=drive,
            delay_on_duty=counted_delay,
            delay_off_duty=off_duty_delay,
            in_shift_break=in_shift_break,
            delay_notes=delays.notes,
            distance_km=drive * request.speed_kmh,
        )
        state.segments.append(segment)
        return segment

    def _check_rules(self, segments: list[Segment], duty_cap: float) -> list[str]:
        """Flag segments whose on-duty time exceeds the cap."""
        warnings = []
        for segment in segments:
            # Small tolerance for float accumulation
            if segment.duty_hours > duty_cap + 1e-9:
                warnings.append(
                    f"Segment {segment.index} exceeds the {duty_cap:g}h duty cap "
                    f"({segment.duty_hours:.2f}h on duty)"
                )
        return warnings


def schedule_trip(request: TripRequest) -> ScheduleResult:
    """
    Convenience function to schedule a trip.

    Args:
        request: Validated TripRequest

    Returns:
        ScheduleResult with the complete timeline
    """
    scheduler = TripScheduler()
    return scheduler.schedule(request)
