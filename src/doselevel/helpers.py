from typing import Iterable

from .types import DosingEvent


def resolvable_events(events: Iterable[DosingEvent]) -> list[DosingEvent]:
    """
    Keep only events whose compound has a usable half-life.
    """
    return [e for e in events if e.has_half_life]
