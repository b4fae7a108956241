import math
from datetime import datetime, timedelta

import numpy as np

from doselevel.types import DosingEvent, LevelSample
from doselevel.dosing import fixed_every_n_days
from doselevel.levels import (
    level_at, current_level, level_curve, iter_level_curve, level_arrays,
    default_resolution, half_life_resolution, estimate_next_trough, estimate_steady_state_trough,
)

T0 = datetime(2024, 1, 1, 9, 0)


def dose(at, amount_mg, half_life_h=168.0, drug_id="Semaglutide"):
    return DosingEvent(timestamp=at, amount_mg=amount_mg, half_life_h=half_life_h, drug_id=drug_id)


def test_no_events_means_zero_level():
    assert current_level([], T0) == 0
    assert level_at(T0 + timedelta(days=400), []) == 0


def test_level_right_after_injection_equals_dose():
    assert math.isclose(level_at(T0, [dose(T0, 1.0)]), 1.0, abs_tol=1e-10)


def test_half_life_decay():
    """One half-life halves the level, two half-lives quarter it."""
    sema = dose(T0, 10.0, half_life_h=168.0)
    assert math.isclose(level_at(T0 + timedelta(hours=168), [sema]), 5.0, abs_tol=1e-10)

    tirz = dose(T0, 8.0, half_life_h=120.0, drug_id="Tirzepatide")
    assert math.isclose(level_at(T0 + timedelta(hours=240), [tirz]), 2.0, abs_tol=1e-10)


def test_future_injection_ignored():
    future = dose(T0 + timedelta(days=1), 10.0)
    assert level_at(T0, [future]) == 0


def test_superposition_of_stacked_injections():
    """At the second injection the first has decayed one half-life."""
    second_at = T0 + timedelta(hours=168)
    events = [dose(T0, 10.0), dose(second_at, 10.0)]
    assert math.isclose(level_at(second_at, events), 15.0, abs_tol=1e-10)


def test_mixed_compounds_sum_independently():
    at = T0 + timedelta(hours=120)
    events = [dose(T0, 1.0, half_life_h=168.0), dose(T0, 4.0, half_life_h=120.0, drug_id="Tirzepatide")]
    expected = 1.0 * 0.5 ** (120 / 168) + 2.0
    assert math.isclose(level_at(at, events), expected, rel_tol=1e-12)


def test_very_old_injection_decays_to_zero():
    level = level_at(T0 + timedelta(hours=168 * 100), [dose(T0, 10.0)])
    assert not math.isnan(level)
    assert 0.0 <= level < 1e-20


def test_malformed_events_contribute_nothing():
    """Missing, zero, negative or NaN half-lives and bad amounts are skipped, not raised."""
    good = dose(T0, 2.0)
    bad = [
        DosingEvent(T0, 5.0),  # unresolved medication
        dose(T0, 5.0, half_life_h=0.0),
        dose(T0, 5.0, half_life_h=-12.0),
        dose(T0, 5.0, half_life_h=float("nan")),
        dose(T0, -5.0),
        dose(T0, float("nan")),
    ]
    for e in bad:
        assert level_at(T0, [e]) == 0
    assert math.isclose(level_at(T0, bad + [good]), 2.0, abs_tol=1e-12)


def test_generate_level_curve():
    """24 h at 12 h resolution gives 0 h, 12 h, 24 h with a decaying level."""
    curve = level_curve([dose(T0, 10.0)], T0, T0 + timedelta(hours=24), timedelta(hours=12))

    assert len(curve) == 3
    assert [s.timestamp for s in curve] == [T0, T0 + timedelta(hours=12), T0 + timedelta(hours=24)]
    assert math.isclose(curve[0].level_mg, 10.0, abs_tol=1e-10)
    assert curve[1].level_mg < curve[0].level_mg
    assert curve[2].level_mg < curve[1].level_mg
    assert all(isinstance(s, LevelSample) for s in curve)


def test_curve_stops_at_last_whole_step():
    end = T0 + timedelta(hours=25)
    curve = level_curve([dose(T0, 1.0)], T0, end, timedelta(hours=12))
    assert len(curve) == 3
    assert curve[-1].timestamp == T0 + timedelta(hours=24)


def test_invalid_curve_bounds_give_empty_curve():
    events = [dose(T0, 1.0)]
    assert level_curve(events, T0, T0 + timedelta(hours=24), timedelta(0)) == []
    assert level_curve(events, T0, T0 + timedelta(hours=24), timedelta(hours=-1)) == []
    assert level_curve(events, T0, T0) == []
    assert level_curve(events, T0 + timedelta(hours=1), T0) == []


def test_curve_uses_default_resolution():
    curve = level_curve([dose(T0, 1.0)], T0, T0 + timedelta(days=2))
    assert len(curve) == 49  # hourly


def test_iter_level_curve_is_lazy():
    gen = iter_level_curve([dose(T0, 3.0)], T0, T0 + timedelta(days=365), timedelta(hours=1))
    first = next(gen)
    assert first.timestamp == T0
    assert math.isclose(first.level_mg, 3.0)


def test_default_resolution_tiers():
    assert default_resolution(timedelta(hours=168)) == timedelta(hours=1)
    assert default_resolution(timedelta(hours=720)) == timedelta(hours=6)
    assert default_resolution(timedelta(hours=744)) == timedelta(hours=6)
    assert default_resolution(timedelta(hours=745)) == timedelta(hours=24)
    assert default_resolution(timedelta(hours=2000)) == timedelta(hours=24)


def test_level_arrays_match_level_curve():
    events = fixed_every_n_days(0.5, every_days=7, weeks=4, start=T0, half_life_h=168.0)
    start, end = T0 - timedelta(days=1), T0 + timedelta(days=35)

    t, L = level_arrays(events, start, end)
    curve = level_curve(events, start, end)

    assert len(t) == len(curve)
    assert np.allclose(L, [s.level_mg for s in curve], rtol=1e-12, atol=1e-15)
    assert np.isclose(t[1] - t[0], 24.0)  # 864 h span -> daily
    assert np.all(L >= 0)


def test_level_arrays_empty_for_bad_bounds():
    t, L = level_arrays([dose(T0, 1.0)], T0, T0)
    assert t.size == 0 and L.size == 0


def test_estimate_next_trough_single_injection():
    """With no observed cadence the interval falls back to the half-life."""
    trough = estimate_next_trough([dose(T0, 10.0, half_life_h=168.0)])
    assert trough is not None
    assert trough.timestamp == T0 + timedelta(hours=168)
    assert math.isclose(trough.level_mg, 5.0, abs_tol=1e-10)


def test_estimate_next_trough_uses_last_interval():
    """Latest interval repeats; earlier doses still contribute residual."""
    events = [dose(T0 + timedelta(days=7), 10.0), dose(T0, 10.0)]
    trough = estimate_next_trough(events)
    assert trough.timestamp == T0 + timedelta(days=14)
    assert math.isclose(trough.level_mg, 10.0 * 0.25 + 10.0 * 0.5, abs_tol=1e-10)


def test_estimate_next_trough_none_without_usable_events():
    assert estimate_next_trough([]) is None
    assert estimate_next_trough([DosingEvent(T0, 5.0)]) is None


def test_estimate_next_trough_out_of_range_half_life():
    """A half-life too large for a datetime offset gives no trough instead of raising."""
    corrupt = dose(T0, 1.0, half_life_h=1e12)
    assert estimate_next_trough([corrupt]) is None
    assert math.isclose(level_at(T0, [corrupt]), 1.0)


def test_estimate_next_trough_ignores_unresolved_for_interval():
    events = [dose(T0, 10.0), DosingEvent(T0 + timedelta(days=2), 5.0)]
    trough = estimate_next_trough(events)
    assert trough.timestamp == T0 + timedelta(hours=168)


def test_steady_state_trough():
    """Weekly dosing with a one-week half-life: decay 0.5, trough 1.0."""
    ss = estimate_steady_state_trough(1.0, 7, 168.0)
    assert math.isclose(ss, 1.0, abs_tol=1e-10)


def test_steady_state_degenerate_inputs():
    assert estimate_steady_state_trough(1.0, 7, 0.0) == 0
    assert estimate_steady_state_trough(1.0, 0, 168.0) == 0
    assert estimate_steady_state_trough(1.0, -7, 168.0) == 0
    assert estimate_steady_state_trough(1.0, 7, -1.0) == 0
    assert estimate_steady_state_trough(1.0, 7, float("inf")) == 0


def test_steady_state_matches_long_regimen():
    """A year of weekly doses ends up at the closed-form trough."""
    events = fixed_every_n_days(1.0, every_days=7, weeks=52, start=T0, half_life_h=168.0)
    trough_at = events[-1].timestamp + timedelta(days=7)
    assert math.isclose(level_at(trough_at, events), estimate_steady_state_trough(1.0, 7, 168.0),
                        rel_tol=1e-9)


def test_half_life_resolution():
    """Quarter of the half-life, never coarser than an hour."""
    assert half_life_resolution(2.0) == timedelta(minutes=30)
    assert half_life_resolution(4.0) == timedelta(hours=1)
    assert half_life_resolution(168.0) == timedelta(hours=1)
    assert half_life_resolution(0.0) == timedelta(hours=1)
    assert half_life_resolution(None) == timedelta(hours=1)
    assert half_life_resolution(120.0, ceiling=timedelta(hours=6)) == timedelta(hours=6)


def test_short_half_life_curve_resolves_troughs():
    """Over a long span the default daily grid misses BPC-157 troughs; a half-life step doesn't."""
    events = fixed_every_n_days(0.25, every_days=1, weeks=9, start=T0, half_life_h=4.0, drug_id="BPC-157")
    end = events[-1].timestamp

    _, coarse = level_arrays(events, T0, end)
    _, fine = level_arrays(events, T0, end, half_life_resolution(4.0))

    assert coarse.min() >= 0.25  # daily samples land on dose spikes only
    assert fine.min() < 0.25 * 0.5 ** 5
