# src/doselevel/models/one_compartment.py
import math
from datetime import datetime

from ..types import DosingEvent

LN2 = math.log(2.0)


def elimination_rate(half_life_h) -> float:
    """
    First-order elimination rate constant ke = ln(2) / t½ (1/h).
    Returns 0.0 when the half-life is missing, non-positive or not finite.
    """
    if half_life_h is None or not math.isfinite(half_life_h) or half_life_h <= 0:
        return 0.0
    return LN2 / half_life_h


def hours_between(earlier: datetime, later: datetime) -> float:
    return (later - earlier).total_seconds() / 3600.0


def bolus_contribution(event: DosingEvent, at: datetime) -> float:
    """
    Level left over from one injection at time `at`.

    Instantaneous absorption, single-exponential elimination, Vd normalized to 1:
      A(t) = Dose * exp(-ke * t)

    Doses given after `at` and events without a usable half-life or amount
    contribute 0.
    """
    if not event.has_half_life:
        return 0.0
    amount = event.amount_mg
    if not math.isfinite(amount) or amount < 0:
        return 0.0
    elapsed_h = hours_between(event.timestamp, at)
    if elapsed_h < 0:
        return 0.0
    return amount * math.exp(-elimination_rate(event.half_life_h) * elapsed_h)


def one_compartment_elimination(t, y, ke):
    """
    One-compartment model without an absorption phase.
    Single state:
      y[0] = drug remaining (mg)

    Parameters:
      t  : current time (h), unused; the system is autonomous
      y  : current state vector [A]
      ke : elimination rate constant (1/h)
    """
    return [-ke * y[0]]
