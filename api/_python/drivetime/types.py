"""
Data structures for trip scheduling.

Inputs (TripRequest, DelayEvent, FerryEvent, Settings) are frozen and built
once by the caller. Outputs (Segment, Rest, ScheduleResult) are produced
fresh by every scheduler run. ScheduleState is the only mutable type and
never outlives a single run.
"""

from collections.abc import Callable
from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any, Literal

# =============================================================================
# Statutory constants
# =============================================================================

DriverType = Literal["single", "two"]
DelayMode = Literal["auto"]
RestType = Literal["daily", "ferry"]

# Daily drive-time allowance per segment
DEFAULT_AVAILABLE_HOURS: dict[str, float] = {"single": 9.0, "two": 18.0}

# Single driver: 45 min break once continuous driving exceeds 4.5h
CONTINUOUS_DRIVE_LIMIT_HOURS = 4.5
IN_SHIFT_BREAK_HOURS = 0.75

STANDARD_DAILY_REST_HOURS = 11.0
REDUCED_DAILY_REST_HOURS = 9.0

# Rest-length policy: receives the 1-based rest index, returns hours
RestPolicy = Callable[[int], float]


def standard_daily_rest(rest_index: int) -> float:
    """
    Default rest policy: every daily rest is the full 11h.

    Policies receive the 1-based rest index rather than being called with no
    arguments, so a policy can stay pure and re-running a trip reproduces
    the same rest lengths.
    """
    return STANDARD_DAILY_REST_HOURS


# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True)
class DutyCaps:
    """Maximum on-duty spread per segment, by driver configuration."""

    single: float = 15.0
    two: float = 21.0

    def for_driver(self, driver_type: DriverType) -> float:
        return self.single if driver_type == "single" else self.two


@dataclass(frozen=True)
class Settings:
    """
    Scheduler settings.

    Defaults:

        delay_mode                  "auto"   only supported mode
        auto_ferry_rest             True     convert long ferries into a rest
        auto_ferry_rest_threshold   6.0      hours, must be >= 0
        duty_cap_hours              15 / 21  single / two, each > 0.75h

    Caps must exceed the in-shift break so a trimmed segment always keeps
    some driving time.
    """

    delay_mode: DelayMode = "auto"
    auto_ferry_rest: bool = True
    auto_ferry_rest_threshold: float = 6.0
    duty_cap_hours: DutyCaps = field(default_factory=DutyCaps)

    def __post_init__(self) -> None:
        if self.delay_mode != "auto":
            raise ValueError(f"Unsupported delay mode: {self.delay_mode}")
        if self.auto_ferry_rest_threshold < 0:
            raise ValueError("auto_ferry_rest_threshold cannot be negative")
        for driver_type in ("single", "two"):
            cap = self.duty_cap_hours.for_driver(driver_type)
            if cap <= IN_SHIFT_BREAK_HOURS:
                raise ValueError(
                    f"Duty cap for {driver_type} driver must exceed "
                    f"{IN_SHIFT_BREAK_HOURS}h, got {cap}"
                )

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "Settings":
        """Build settings from a partial JSON object, filling in defaults."""
        if not data:
            return cls()

        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(sorted(unknown))}")

        kwargs = dict(data)
        caps = kwargs.pop("duty_cap_hours", None)
        if caps is not None:
            kwargs["duty_cap_hours"] = DutyCaps(
                single=float(caps.get("single", DutyCaps.single)),
                two=float(caps.get("two", DutyCaps.two)),
            )
        if "auto_ferry_rest_threshold" in kwargs:
            kwargs["auto_ferry_rest_threshold"] = float(kwargs["auto_ferry_rest_threshold"])
        return cls(**kwargs)


# =============================================================================
# Request Types
# =============================================================================


@dataclass(frozen=True)
class DelayEvent:
    """Delay attached to one segment (e.g. a refuelling stop)."""

    segment_index: int  # 1-based
    delay_hours: float


@dataclass(frozen=True)
class FerryEvent:
    """Ferry crossing. At most one per trip."""

    segment_index: int  # 1-based
    delay_hours: float


@dataclass(frozen=True)
class TripRequest:
    """Validated input for a scheduler run."""

    total_drive_hours: float
    driver_type: DriverType
    speed_kmh: float
    start_time: datetime
    default_available_hours: float | None = None  # None = 9h single / 18h two
    first_segment_available_hours: float | None = None  # None = default
    refuel_events: list[DelayEvent] = field(default_factory=list)
    ferry_event: FerryEvent | None = None
    settings: Settings = field(default_factory=Settings)
    pick_daily_rest: RestPolicy = standard_daily_rest

    @property
    def is_single(self) -> bool:
        return self.driver_type == "single"

    @property
    def duty_cap(self) -> float:
        return self.settings.duty_cap_hours.for_driver(self.driver_type)

    def segment_ceiling(self, segment_index: int) -> float:
        """Drive-time ceiling for the given 1-based segment."""
        default = self.default_available_hours
        if default is None:
            default = DEFAULT_AVAILABLE_HOURS[self.driver_type]
        if segment_index == 1 and self.first_segment_available_hours is not None:
            return self.first_segment_available_hours
        return default


# =============================================================================
# Result Types
# =============================================================================


@dataclass(frozen=True)
class Segment:
    """One duty period between rests."""

    index: int
    start: datetime
    end: datetime
    drive_hours: float
    delay_on_duty: float
    delay_off_duty: float
    in_shift_break: float
    delay_notes: tuple[str, ...] = ()
    distance_km: float = 0.0

    @property
    def duty_hours(self) -> float:
        """Hours counted against the duty cap."""
        return self.drive_hours + self.in_shift_break + self.delay_on_duty

    @property
    def is_delay_only(self) -> bool:
        return self.drive_hours == 0 and (self.delay_on_duty + self.delay_off_duty) > 0


@dataclass(frozen=True)
class Rest:
    """Daily rest, or a ferry crossing standing in for one."""

    index: int  # 1-based, counts every rest in the trip
    type: RestType
    start: datetime
    end: datetime
    duration_hours: float
    after_segment: int = 0  # index of the segment this rest follows

    @property
    def is_reduced(self) -> bool:
        return self.duration_hours < STANDARD_DAILY_REST_HOURS


@dataclass
class ScheduleResult:
    """Complete timeline produced by the scheduler."""

    start_time: datetime
    segments: list[Segment]
    rests: list[Rest]
    final_time: datetime
    warnings: list[str] = field(default_factory=list)

    @property
    def total_hours(self) -> float:
        return (self.final_time - self.start_time).total_seconds() / 3600

    @property
    def total_distance_km(self) -> float:
        return sum(s.distance_km for s in self.segments)


@dataclass
class ScheduleState:
    """Mutable state owned by one scheduler run."""

    current_time: datetime
    remaining_drive: float
    duty_used: float = 0.0
    segment_index: int = 0
    rest_count: int = 0
    segments: list[Segment] = field(default_factory=list)
    rests: list[Rest] = field(default_factory=list)
