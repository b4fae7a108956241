# src/doselevel/metrics.py
import numpy as np
from typing import Tuple

# All functions take (t, L) arrays as produced by levels.level_arrays:
# t in hours, L in dose-equivalent mg. Empty curves give nan, never raise.


def cmax(L: np.ndarray) -> float:
    """Global maximum level (mg)."""
    return float(np.max(L)) if len(L) else float("nan")

def tmax(t: np.ndarray, L: np.ndarray) -> float:
    """Time of maximum level (h)."""
    return float(t[int(np.argmax(L))]) if len(L) else float("nan")

def cmin(L: np.ndarray) -> float:
    """Global minimum level (mg)."""
    return float(np.min(L)) if len(L) else float("nan")

def tmin(t: np.ndarray, L: np.ndarray) -> float:
    """Time of minimum level (h)."""
    return float(t[int(np.argmin(L))]) if len(L) else float("nan")

def cmax_tmax(t: np.ndarray, L: np.ndarray) -> Tuple[float, float]:
    """Return peak level (mg) and its time (h)."""
    return cmax(L), tmax(t, L)

def auc_trapz(t: np.ndarray, L: np.ndarray) -> float:
    """Area under the level curve via trapezoidal rule (mg*h)."""
    if len(L) < 2:
        return 0.0
    return float(np.trapezoid(L, t))

def cavg(L: np.ndarray) -> float:
    """Average level over the sampled horizon."""
    return float(np.mean(L)) if len(L) else float("nan")

def _window_indices_for_last_interval(t: np.ndarray, interval_h: float) -> np.ndarray:
    """
    Return a boolean mask for samples in the last full dosing interval.
    If no full interval fits, fall back to all samples.
    """
    if interval_h <= 0:
        return np.ones_like(t, dtype=bool)
    last_edge = (t[-1] // interval_h) * interval_h
    start = last_edge - interval_h
    if start < t[0]:
        return np.ones_like(t, dtype=bool)
    return (t >= start) & (t <= last_edge)

def _window(t: np.ndarray, L: np.ndarray, interval_h: float | None) -> np.ndarray:
    if interval_h:
        return L[_window_indices_for_last_interval(t, float(interval_h))]
    return L

def peak_to_trough_ratio(t: np.ndarray, L: np.ndarray, interval_h: float | None = None) -> float:
    """
    Peak-to-Trough Ratio (PTR) = Lmax / Lmin.
    If interval_h is provided, compute over the last full dosing interval; otherwise use the full series.
    """
    if not len(L):
        return float("nan")
    Lw = _window(t, L, interval_h)
    lmin = float(np.min(Lw))
    if lmin <= 0:
        return float("inf")
    return float(np.max(Lw)) / lmin

def fluctuation_index(t: np.ndarray, L: np.ndarray, interval_h: float | None = None) -> float:
    """
    Fluctuation Index (FI) = (Lmax - Lmin) / Lavg.
    If interval_h is provided, compute over the last full dosing interval; otherwise use the full series.
    """
    if not len(L):
        return float("nan")
    Lw = _window(t, L, interval_h)
    lavg = float(np.mean(Lw))
    if lavg == 0.0:
        return float("inf")
    return (float(np.max(Lw)) - float(np.min(Lw))) / lavg
