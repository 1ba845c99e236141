"""
Daily rest length policies.

The scheduler only ever calls a `pick_daily_rest(rest_index)` callback. The
weekly allowance of reduced (9h) rests is tracked here, by an object the
caller owns and keeps between recalculations. The scheduler never sees the
counter itself.
"""

from dataclasses import dataclass, field

from ..types import REDUCED_DAILY_REST_HOURS, STANDARD_DAILY_REST_HOURS

MAX_REDUCED_RESTS_PER_WEEK = 2


@dataclass
class ReducedRestTracker:
    """
    Weekly reduced-rest bookkeeping.

    Usage:
        tracker = ReducedRestTracker()
        result = schedule_trip(replace(request, pick_daily_rest=tracker.pick_daily_rest))
        if tracker.reduce(2):
            result = schedule_trip(...)  # rest #2 is now 9h
    """

    used_this_week: int = 0
    forced_rests: set[int] = field(default_factory=set)
    max_per_week: int = MAX_REDUCED_RESTS_PER_WEEK

    @property
    def remaining(self) -> int:
        return max(0, self.max_per_week - self.used_this_week)

    def can_reduce(self) -> bool:
        return self.remaining > 0

    def reduce(self, rest_index: int) -> bool:
        """
        Shorten the given rest to 9h on the next run.

        Returns False if the weekly allowance is used up. Reducing a rest
        that is already reduced is a no-op that does not consume allowance.
        """
        if rest_index in self.forced_rests:
            return True
        if not self.can_reduce():
            return False
        self.forced_rests.add(rest_index)
        self.used_this_week += 1
        return True

    def reset_week(self) -> None:
        """Start a new week: counter back to zero.

        Rests already reduced in the current plan stay reduced.
        """
        self.used_this_week = 0

    def pick_daily_rest(self, rest_index: int) -> float:
        """Rest policy callback for TripRequest.pick_daily_rest."""
        if rest_index in self.forced_rests:
            return REDUCED_DAILY_REST_HOURS
        return STANDARD_DAILY_REST_HOURS
