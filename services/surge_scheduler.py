"""
Surge pricing scheduler.

Builds a per-time-slot price multiplier schedule from a campaign's hourly
performance:

1. Average revenue per hour of day over the last 7 days of hourly rows
2. Classify each named slot by its average hourly revenue relative to the
   overall hourly average (high / medium / low)
3. Apply the multiplier for the slot's demand level
4. Project slot revenue at the surge price:
   expected = baseline * multiplier * multiplier ** surge_elasticity
"""

from __future__ import annotations

import logging
import statistics
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from domain.pricing import (
    DemandLevel,
    HourlyPerformance,
    SurgeMultipliers,
    SurgeSlot,
    TimeSlot,
    to_money,
)
from services.ports import PerformanceSource

logger = logging.getLogger(__name__)

PERFORMANCE_LOOKBACK_HOURS: int = 168
MIN_PERFORMANCE_HOURS: int = 24
SURGE_ELASTICITY: float = -0.5

DEFAULT_TIME_SLOTS: tuple[TimeSlot, ...] = (
    TimeSlot("Overnight", 0, 6),
    TimeSlot("Morning", 6, 12),
    TimeSlot("Afternoon", 12, 17),
    TimeSlot("Evening", 17, 22),
    TimeSlot("Late Night", 22, 24),
)

INSUFFICIENT_DATA = "Need at least 24 hours of data for surge pricing optimization"
SURGE_FAILED = "Surge pricing optimization failed"


@dataclass(frozen=True, slots=True)
class DemandThresholds:
    """
    Demand classification by revenue ratio (slot average / overall average).

    ratio >= high_ratio -> HIGH, ratio <= low_ratio -> LOW, otherwise MEDIUM.
    """
    high_ratio: float = 1.2
    low_ratio: float = 0.8

    def __post_init__(self) -> None:
        if not 0 < self.low_ratio < self.high_ratio:
            raise ValueError("Demand thresholds must satisfy 0 < low_ratio < high_ratio")

    def classify(self, ratio: float) -> DemandLevel:
        if ratio >= self.high_ratio:
            return DemandLevel.HIGH
        if ratio <= self.low_ratio:
            return DemandLevel.LOW
        return DemandLevel.MEDIUM


@dataclass(frozen=True, slots=True)
class SurgePricingResult:
    surge_schedule: List[SurgeSlot] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def average_revenue_by_hour(rows: Sequence[HourlyPerformance]) -> Dict[int, float]:
    """Mean revenue per UTC hour of day, for hours that have observations."""

    by_hour: Dict[int, List[float]] = defaultdict(list)
    for row in rows:
        by_hour[row.recorded_at.hour].append(float(row.revenue))
    return {hour: statistics.fmean(values) for hour, values in by_hour.items()}


class SurgeScheduler:
    def __init__(
        self,
        performance: PerformanceSource,
        time_slots: Sequence[TimeSlot] = DEFAULT_TIME_SLOTS,
        multipliers: Optional[SurgeMultipliers] = None,
        thresholds: Optional[DemandThresholds] = None,
        surge_elasticity: float = SURGE_ELASTICITY,
    ) -> None:
        if not time_slots:
            raise ValueError("At least one time slot is required")
        self._performance = performance
        self._time_slots = tuple(time_slots)
        self._multipliers = multipliers or SurgeMultipliers()
        self._thresholds = thresholds or DemandThresholds()
        self._surge_elasticity = surge_elasticity

    def optimize_surge_pricing(self, campaign_id: str) -> SurgePricingResult:
        """
        Surge schedule with one entry per configured time slot, in slot order.
        """
        try:
            rows = self._performance.get_hourly_performance(
                campaign_id, PERFORMANCE_LOOKBACK_HOURS
            )
            if len(rows) < MIN_PERFORMANCE_HOURS:
                return SurgePricingResult(error=INSUFFICIENT_DATA)

            hourly = average_revenue_by_hour(rows)
            overall = statistics.fmean(hourly.values())

            schedule = [self._build_slot(slot, hourly, overall) for slot in self._time_slots]
            return SurgePricingResult(surge_schedule=schedule)

        except Exception:
            logger.exception("Surge pricing error", extra={"campaign_id": campaign_id})
            return SurgePricingResult(error=SURGE_FAILED)

    def _build_slot(self, slot: TimeSlot, hourly: Dict[int, float], overall: float) -> SurgeSlot:
        observed = [hourly[hour] for hour in slot.hours() if hour in hourly]

        if observed and overall > 0:
            level = self._thresholds.classify(statistics.fmean(observed) / overall)
        else:
            level = DemandLevel.MEDIUM

        multiplier = self._multipliers.for_level(level)
        baseline = sum(observed)
        expected = baseline * multiplier * multiplier ** self._surge_elasticity

        return SurgeSlot(
            time_slot=slot.label,
            demand_level=level,
            price_multiplier=multiplier,
            expected_revenue=to_money(expected),
        )


__all__ = [
    "DEFAULT_TIME_SLOTS",
    "DemandThresholds",
    "SurgePricingResult",
    "SurgeScheduler",
    "average_revenue_by_hour",
]
