# src/doselevel/solvers.py
import math
from collections import defaultdict
from datetime import datetime
from typing import Sequence

import numpy as np
from scipy.integrate import solve_ivp

from .types import DosingEvent
from .helpers import resolvable_events
from .models.one_compartment import elimination_rate, hours_between, one_compartment_elimination


def simulate_single_compound(ke_per_h: float, doses: Sequence[tuple[float, float]],
                             t_end_h: float, dt_h: float = 1.0):
    """
    Integrate first-order elimination for one compound.

    doses are (time_h, amount_mg) pairs, applied as instantaneous jumps at
    their time. Doses before t=0 are folded into the initial state.

    Returns:
      t : array of time points (hours)
      A : array of amounts (mg)
    """
    t_grid = np.arange(0.0, t_end_h + dt_h / 2, dt_h)
    t_grid = t_grid[t_grid <= t_end_h]

    # Prior doses decay analytically up to t=0
    y0 = [float(sum(a * np.exp(ke_per_h * t_h) for t_h, a in doses
                    if t_h < 0 and not np.isclose(t_h, 0.0)))]

    # Segment boundaries at every dose so the jumps land exactly
    boundaries: list[float] = [0.0]
    for t_h, _ in doses:
        if 0.0 <= t_h <= t_end_h:
            boundaries.append(float(t_h))
    boundaries.append(float(t_end_h))
    boundaries = sorted(set(boundaries))

    def rhs(t, y):
        return one_compartment_elimination(t, y, ke_per_h)

    def jumps_at(t_h):
        return sum(a for d_t, a in doses if np.isclose(d_t, t_h))

    y0[0] += jumps_at(0.0)

    t_out: list[float] = []
    A_out: list[float] = []
    if t_grid.size and np.isclose(t_grid[0], 0.0):
        t_out.append(0.0)
        A_out.append(y0[0])

    prev = boundaries[0]
    for curr in boundaries[1:]:
        if curr <= prev:
            continue
        t_eval_seg = t_grid[(t_grid > prev) & (t_grid <= curr)]
        sol_seg = solve_ivp(rhs, t_span=(prev, curr), y0=y0, method="RK45",
                            dense_output=True, rtol=1e-9, atol=1e-12)
        if t_eval_seg.size:
            t_out.extend(t_eval_seg.tolist())
            A_out.extend(sol_seg.sol(t_eval_seg)[0].tolist())
        y_end = float(sol_seg.sol(curr)[0])

        # The closed form counts a dose at its own timestamp, so a sample
        # sitting exactly on a dose time includes the jump.
        jump = jumps_at(curr)
        if jump and A_out and np.isclose(t_out[-1], curr):
            A_out[-1] += jump
        y0 = [y_end + jump]
        prev = curr

    return np.asarray(t_out), np.asarray(A_out)


def simulate_elimination(events: Sequence[DosingEvent], start: datetime,
                         t_end_h: float, dt_h: float = 1.0):
    """
    Reference ODE solution of the superposition model.

    Each drug_id is integrated independently with its own half-life and the
    amounts are summed. Events without a usable half-life or with a negative
    or non-finite amount are left out, as in the closed form.

    Returns
    -------
    t : np.ndarray
        Time in hours since `start`.
    A : np.ndarray
        Total modeled amount (mg).
    """
    t = np.arange(0.0, t_end_h + dt_h / 2, dt_h)
    t = t[t <= t_end_h]
    total = np.zeros_like(t)

    # Group by (drug_id, half-life): one ODE per compound
    compounds: dict[tuple[str, float], list[tuple[float, float]]] = defaultdict(list)
    for e in resolvable_events(events):
        if not math.isfinite(e.amount_mg) or e.amount_mg < 0:
            continue
        compounds[(e.drug_id, e.half_life_h)].append(
            (hours_between(start, e.timestamp), float(e.amount_mg)))

    for (_, half_life_h), doses in compounds.items():
        _, A_c = simulate_single_compound(elimination_rate(half_life_h), doses, t_end_h, dt_h)
        total[: len(A_c)] += A_c

    return t, total
