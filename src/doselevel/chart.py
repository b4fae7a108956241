# src/doselevel/chart.py
"""
Data behind the medication level chart: the historical curve up to "now"
and a short projection after it, for a selected period and compound.
"""
import enum
from datetime import datetime, timedelta
from typing import NamedTuple, Optional, Sequence

from . import config
from .types import DosingEvent
from .levels import level_curve


class ChartPeriod(enum.Enum):
    ONE_WEEK = "1W"
    ONE_MONTH = "1M"
    THREE_MONTHS = "3M"
    SIX_MONTHS = "6M"
    ALL = "All"

    @property
    def days(self) -> Optional[int]:
        return _PERIOD_DAYS[self]


_PERIOD_DAYS = {
    ChartPeriod.ONE_WEEK: 7,
    ChartPeriod.ONE_MONTH: 30,
    ChartPeriod.THREE_MONTHS: 90,
    ChartPeriod.SIX_MONTHS: 180,
    ChartPeriod.ALL: None,
}


class ChartPoint(NamedTuple):
    timestamp: datetime
    level_mg: float
    is_projected: bool


def relevant_events(events: Sequence[DosingEvent], now: datetime,
                    period: ChartPeriod = ChartPeriod.ALL,
                    drug_name: Optional[str] = None) -> list[DosingEvent]:
    """
    Events to chart: those whose drug_id contains `drug_name` (case-insensitive,
    all events when empty), restricted to the last `period.days` before `now`.
    """
    if drug_name:
        needle = drug_name.lower()
        selected = [e for e in events if needle in e.drug_id.lower()]
    else:
        selected = list(events)

    if period.days is None:
        return selected
    cutoff = now - timedelta(days=period.days)
    return [e for e in selected if e.timestamp >= cutoff]


def level_chart(events: Sequence[DosingEvent], now: datetime,
                period: ChartPeriod = ChartPeriod.ALL,
                drug_name: Optional[str] = None,
                projection_days: Optional[int] = None) -> list[ChartPoint]:
    """
    Historical curve from the earliest relevant injection to `now`, then a
    projected curve from `now` to `now + projection_days`.
    """
    selected = relevant_events(events, now, period, drug_name)
    if not selected:
        return []

    if projection_days is None:
        projection_days = config.PROJECTION_DAYS
    earliest = min(e.timestamp for e in selected)

    points = [ChartPoint(s.timestamp, s.level_mg, False)
              for s in level_curve(selected, earliest, now)]
    points += [ChartPoint(s.timestamp, s.level_mg, True)
               for s in level_curve(selected, now, now + timedelta(days=projection_days))]
    return points
