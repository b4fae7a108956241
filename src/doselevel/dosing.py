# src/doselevel/dosing.py
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Sequence, Tuple

import numpy as np

from .types import DosingEvent


def single_dose(amount_mg: float, at: datetime, half_life_h: float, *, drug_id: str = "default") -> tuple[DosingEvent, ...]:
    """
    Create a regimen with exactly one injection.
    Example: 0.25 mg semaglutide (t½ 168 h) on 2024-01-01 09:00
    drug_id       : identifier/name of the compound this dose belongs to (default "default")
    """
    _validate_non_negative("amount_mg", amount_mg)
    _validate_positive("half_life_h", half_life_h)
    return (DosingEvent(timestamp=at, amount_mg=float(amount_mg),
                        half_life_h=float(half_life_h), drug_id=drug_id),)


def fixed_every_n_days(amount_mg: float, every_days: int, weeks: int, start: datetime,
                       half_life_h: float, *, drug_id: str = "default") -> tuple[DosingEvent, ...]:
    """
    Make a repeated schedule like: 2.5 mg tirzepatide every 7 days for 8 weeks.

    amount_mg      : size of each injection, mg
    every_days     : spacing between injections, in whole days (e.g., 7)
    weeks          : total regimen length in weeks
    start          : time of the first injection
    half_life_h    : elimination half-life of the compound, hours
    drug_id        : identifier/name of the compound these doses belong to (default "default")
    """
    _validate_non_negative("amount_mg", amount_mg)
    _validate_positive_int("every_days", every_days)
    _validate_positive_int("weeks", weeks)
    _validate_positive("half_life_h", half_life_h)

    total_days = weeks * 7
    # Injection days: 0, every_days, 2*every_days, ... <= total_days
    day_offsets = np.arange(0, total_days + 1, every_days)

    return tuple(
        DosingEvent(timestamp=start + timedelta(days=int(d)), amount_mg=float(amount_mg),
                    half_life_h=float(half_life_h), drug_id=drug_id)
        for d in day_offsets
    )


def combine_regimens(*regimens: Sequence[DosingEvent]) -> tuple[DosingEvent, ...]:
    """
    Merge multiple regimens into one (e.g., a semaglutide schedule + a BPC-157 course).
    Events are concatenated and sorted by time; the engine doesn't need the order.
    """
    all_events: list[DosingEvent] = []
    for r in regimens:
        all_events.extend(r)
    return tuple(sorted(all_events, key=lambda e: e.timestamp))


def from_explicit_schedule(entries: Sequence[Tuple[datetime, float]], half_life_h: float,
                           *, drug_id: str = "default") -> tuple[DosingEvent, ...]:
    """
    Build a regimen from manual (timestamp, amount_mg) entries.
    Example: entries=[(jan_1, 0.25), (jan_8, 0.25), (jan_15, 0.5)]
    drug_id       : identifier/name of the compound these doses belong to (default "default")
    """
    _validate_positive("half_life_h", half_life_h)
    events: list[DosingEvent] = []
    for at, amount_mg in entries:
        _validate_non_negative("amount_mg", amount_mg)
        events.append(DosingEvent(timestamp=at, amount_mg=float(amount_mg),
                                  half_life_h=float(half_life_h), drug_id=drug_id))
    events.sort(key=lambda e: e.timestamp)
    return tuple(events)


# --------------------------
# Small input validators
# --------------------------
def _validate_positive(name: str, x: float) -> None:
    if not (x > 0):
        raise ValueError(f"{name} must be > 0 (got {x}).")

def _validate_non_negative(name: str, x: float) -> None:
    if not (x >= 0):
        raise ValueError(f"{name} must be >= 0 (got {x}).")

def _validate_positive_int(name: str, x: int) -> None:
    if not (isinstance(x, int) and x > 0):
        raise ValueError(f"{name} must be a positive integer (got {x}).")
