# src/doselevel/levels.py
"""
Estimated medication levels from a log of injections.

Each injection decays independently (one compartment, instantaneous
absorption, Vd normalized to 1) and the contributions are summed:

    L(t) = sum_i Dose_i * exp(-ke_i * (t - t_i)),   for t >= t_i
    ke_i = ln(2) / t½_i

Levels are dose-equivalent milligrams, not true concentrations.
Malformed events never raise: they contribute 0 and the rest of the
sum is unaffected.
"""
import logging
import math
from datetime import datetime, timedelta
from typing import Iterable, Iterator, Optional, Sequence

import numpy as np

from .types import DosingEvent, LevelSample, Trough
from .helpers import resolvable_events
from .models.one_compartment import bolus_contribution, elimination_rate

log = logging.getLogger(__name__)

HOUR = timedelta(hours=1)

# Default curve resolution tiers, keyed by span (hours)
WEEK_SPAN_H = 168.0
MONTH_SPAN_H = 744.0  # 31 days


def level_at(at: datetime, events: Iterable[DosingEvent]) -> float:
    """Estimated level (mg) at `at`, summed over every event."""
    return sum((bolus_contribution(e, at) for e in events), 0.0)


def current_level(events: Iterable[DosingEvent], now: datetime) -> float:
    """Estimated level at `now`. The caller owns the clock."""
    return level_at(now, events)


def default_resolution(span: timedelta) -> timedelta:
    """
    Sampling step for a curve covering `span`:
      up to a week  -> 1 hour
      up to 31 days -> 6 hours
      longer        -> 1 day
    """
    hours = span.total_seconds() / 3600.0
    if hours <= WEEK_SPAN_H:
        return HOUR
    elif hours <= MONTH_SPAN_H:
        return 6 * HOUR
    else:
        return 24 * HOUR


def half_life_resolution(half_life_h: float, ceiling: timedelta = HOUR) -> timedelta:
    """
    Step fine enough to resolve decay between doses: a quarter of the
    half-life, capped at `ceiling`. Falls back to `ceiling` for an unusable half-life.
    """
    if half_life_h is None or not math.isfinite(half_life_h) or half_life_h <= 0:
        return ceiling
    return min(ceiling, timedelta(hours=half_life_h / 4.0))


def _curve_grid(start: datetime, end: datetime,
                resolution: Optional[timedelta]) -> Optional[tuple[timedelta, int]]:
    """Step and number of steps for [start, end], or None if there is nothing to sample."""
    if end <= start:
        log.debug("empty level curve: end %s is not after start %s", end, start)
        return None
    step = resolution if resolution is not None else default_resolution(end - start)
    if step <= timedelta(0):
        log.debug("empty level curve: non-positive resolution %s", step)
        return None
    return step, (end - start) // step


def iter_level_curve(events: Sequence[DosingEvent], start: datetime, end: datetime,
                     resolution: Optional[timedelta] = None) -> Iterator[LevelSample]:
    """
    Lazily sample the level from `start` to `end` (inclusive) every `resolution`.

    The last sample falls on the last whole step that fits, which may be
    before `end`. Yields nothing for an empty span or non-positive resolution.
    """
    grid = _curve_grid(start, end, resolution)
    if grid is None:
        return
    step, n_steps = grid
    for i in range(n_steps + 1):
        t = start + i * step
        yield LevelSample(t, level_at(t, events))


def level_curve(events: Sequence[DosingEvent], start: datetime, end: datetime,
                resolution: Optional[timedelta] = None) -> list[LevelSample]:
    """Materialised level curve; see iter_level_curve."""
    return list(iter_level_curve(events, start, end, resolution))


def level_arrays(events: Sequence[DosingEvent], start: datetime, end: datetime,
                 resolution: Optional[timedelta] = None):
    """
    Vectorised level curve on the same grid as level_curve.

    Returns:
      t : array of time points (hours since `start`)
      L : array of levels (mg)
    """
    grid = _curve_grid(start, end, resolution)
    if grid is None:
        return np.empty(0), np.empty(0)
    step, n_steps = grid
    # Work in seconds so samples on a dose time compare exactly
    t_s = np.arange(n_steps + 1, dtype=float) * step.total_seconds()

    L = np.zeros_like(t_s)
    for e in resolvable_events(events):
        if not math.isfinite(e.amount_mg) or e.amount_mg < 0:
            continue
        elapsed_s = t_s - (e.timestamp - start).total_seconds()
        # Only doses already given contribute
        mask = elapsed_s >= 0
        L[mask] += e.amount_mg * np.exp(-elimination_rate(e.half_life_h) * elapsed_s[mask] / 3600.0)
    return t_s / 3600.0, L


def estimate_next_trough(events: Sequence[DosingEvent]) -> Optional[Trough]:
    """
    Project the trough just before the next expected dose, assuming the
    most recent dosing interval repeats.

    With a single usable injection there is no observed cadence; the interval
    then falls back to that compound's half-life. This is an arbitrary default,
    not a clinical dosing interval.
    """
    usable = sorted(resolvable_events(events), key=lambda e: e.timestamp)
    if not usable:
        return None

    last = usable[-1]
    try:
        if len(usable) >= 2:
            interval = last.timestamp - usable[-2].timestamp
        else:
            interval = timedelta(hours=last.half_life_h)
        trough_at = last.timestamp + interval
    except (OverflowError, ValueError):
        log.debug("no trough: projection from %s falls outside the datetime range", last.timestamp)
        return None
    return Trough(trough_at, level_at(trough_at, events))


def estimate_steady_state_trough(dose_mg: float, interval_days: float, half_life_h: float) -> float:
    """
    Trough level at steady state for `dose_mg` repeated every `interval_days`.

    Geometric series over infinitely many doses:
      C_trough_ss = Dose * e^(-ke*tau) / (1 - e^(-ke*tau)),  tau = interval in hours

    Returns 0.0 for a non-positive half-life or interval.
    """
    if not (half_life_h > 0) or not (interval_days > 0):
        return 0.0
    ke = elimination_rate(half_life_h)
    tau = float(interval_days) * 24.0
    decay = math.exp(-ke * tau)
    if decay >= 1.0:
        return 0.0
    return dose_mg * decay / (1.0 - decay)
