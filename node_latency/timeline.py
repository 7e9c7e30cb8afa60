"""Assemble event timings into a single timeline."""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from .sources import Event, Timing

logger = logging.getLogger("node_latency.timeline")


def _utc(ts: datetime) -> datetime:
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def collect_timings(events: List[Event], reference: Optional[datetime] = None) -> List[Timing]:
    """Evaluate every event and compute elapsed time relative to a reference.

    A failing event yields a single Timing carrying the error instead of
    aborting the timeline.

    Args:
        events: Bound events to evaluate.
        reference: Start of the timeline. Defaults to the earliest timestamp found.

    Returns:
        Timings sorted ascending by timestamp, timings without a timestamp last.
    """
    timings: List[Timing] = []
    for event in events:
        try:
            results = event.find()
        except Exception as e:
            logger.warning(f"Unable to time event {event.name!r} from {event.src}: {e}")
            timings.append(Timing(event=event, error=e))
            continue
        for result in results:
            timings.append(
                Timing(
                    event=event,
                    timestamp=_utc(result.timestamp) if result.timestamp else None,
                    comment=result.comment,
                    error=result.err,
                )
            )

    stamped = [timing for timing in timings if timing.timestamp is not None]
    if reference is None and stamped:
        reference = min(timing.timestamp for timing in stamped)
    if reference is not None:
        reference = _utc(reference)
        for timing in stamped:
            timing.t = timing.timestamp - reference

    stamped.sort(key=lambda timing: timing.timestamp)
    return stamped + [timing for timing in timings if timing.timestamp is None]


def terminal_reached(timings: List[Timing]) -> bool:
    """True once a terminal event has a successful timing."""
    return any(timing.event.terminal and timing.error is None and timing.timestamp for timing in timings)
