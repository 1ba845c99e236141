"""
Per-segment delay resolution.

Collects the refuel and ferry delays assigned to a segment and decides
whether the ferry crossing is long enough to stand in for a daily rest.
"""

from dataclasses import dataclass, field

from ..types import DelayEvent, FerryEvent, Settings


@dataclass(frozen=True)
class DelayResolution:
    """Delays attributable to one segment."""

    extra_delay: float = 0.0  # Refuel + ferry hours
    notes: tuple[str, ...] = field(default_factory=tuple)
    ferry_as_rest: bool = False
    ferry_delay: float = 0.0

    @property
    def has_delay(self) -> bool:
        return self.extra_delay > 0


def resolve_delays(
    segment_index: int,
    refuel_events: list[DelayEvent],
    ferry_event: FerryEvent | None,
    settings: Settings,
) -> DelayResolution:
    """
    Resolve the delays for a single segment.

    Args:
        segment_index: 1-based segment index
        refuel_events: All refuel events of the trip, in input order
        ferry_event: The trip's ferry crossing, if any
        settings: Scheduler settings (auto ferry rest toggle and threshold)

    Returns:
        DelayResolution with total delay, notes in input order, and the
        ferry-as-rest decision
    """
    extra_delay = 0.0
    notes: list[str] = []

    for event in refuel_events or ():
        if event.segment_index == segment_index:
            extra_delay += event.delay_hours
            notes.append(f"refuel {event.delay_hours:.2f}h")

    ferry_delay = 0.0
    ferry_as_rest = False
    if (
        ferry_event is not None
        and ferry_event.delay_hours > 0
        and ferry_event.segment_index == segment_index
    ):
        ferry_delay = ferry_event.delay_hours
        extra_delay += ferry_delay
        notes.append(f"ferry {ferry_delay:.2f}h")
        # Threshold 0 means any positive crossing counts
        ferry_as_rest = (
            settings.auto_ferry_rest and ferry_delay >= settings.auto_ferry_rest_threshold
        )

    return DelayResolution(
        extra_delay=extra_delay,
        notes=tuple(notes),
        ferry_as_rest=ferry_as_rest,
        ferry_delay=ferry_delay,
    )
