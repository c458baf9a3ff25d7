"""
Domain: Pricing recommendations, competitor comparisons and surge slots.

Invariants implemented here:
- PricingRecommendation: price_elasticity < 0, confidence in [0, 100],
  recommended_price > 0.
- CompetitorComparison: avg_market_price == mean(competitor_prices) and
  price_position is always derived from the price comparison, never set
  independently.
- SurgeSlot: price_multiplier > 0. Multiplier ordering across demand levels
  is enforced by SurgeMultipliers (low <= 1.0 <= high, non-decreasing).

Money is Decimal quantized to cents; ratios are floats.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import List, Optional, Sequence

from .time import require_utc_timestamp

CENT = Decimal("0.01")

# Prices within half a cent of the market average are "at" market.
PRICE_POSITION_TOLERANCE = Decimal("0.005")


def to_money(value: Decimal | float | int | str) -> Decimal:
    """Quantize a numeric value to cents (half-up)."""

    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True, slots=True)
class CampaignProduct:
    """
    Product price point attached to a campaign.

    units_sold is the baseline demand observed at current_price over the
    reference period; it anchors demand models when history is thin.
    """

    product_id: str
    current_price: Decimal
    units_sold: float = 0.0
    product_name: Optional[str] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None

    def __post_init__(self) -> None:
        if self.current_price <= 0:
            raise ValueError("current_price must be > 0")
        if self.units_sold < 0:
            raise ValueError("units_sold must be >= 0")
        if (
            self.min_price is not None
            and self.max_price is not None
            and self.min_price > self.max_price
        ):
            raise ValueError("min_price must be <= max_price")


@dataclass(frozen=True, slots=True)
class PricePoint:
    """One historical (price, units sold) observation for a product."""

    price: Decimal
    units_sold: float
    recorded_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if self.price <= 0:
            raise ValueError("price must be > 0")
        if self.units_sold < 0:
            raise ValueError("units_sold must be >= 0")
        if self.recorded_at is not None:
            require_utc_timestamp("recorded_at", self.recorded_at)


@dataclass(frozen=True, slots=True)
class PricingRecommendation:
    """Recommended price for one product with its model diagnostics."""

    product_id: str
    current_price: Decimal
    recommended_price: Decimal
    expected_revenue: Decimal
    price_elasticity: float
    confidence: float

    def __post_init__(self) -> None:
        if self.recommended_price <= 0:
            raise ValueError("recommended_price must be > 0")
        if not self.price_elasticity < 0:
            raise ValueError("price_elasticity must be < 0")
        if not 0 <= self.confidence <= 100:
            raise ValueError("confidence must be within [0, 100]")

    @property
    def relative_price_change(self) -> Decimal:
        """(recommended - current) / current, signed."""

        return (self.recommended_price - self.current_price) / self.current_price

    @property
    def weighted_revenue_change(self) -> Decimal:
        """expected_revenue weighted by the relative price change (signed)."""

        return self.expected_revenue * self.relative_price_change


def total_revenue_increase(recommendations: Sequence[PricingRecommendation]) -> Decimal:
    """
    Aggregate revenue increase across recommendations:

    total = sum(expected_revenue_i * (recommended_i - current_i) / current_i)

    A price decrease contributes negatively even when expected revenue is
    positive. Rounded to cents only after summing.
    """

    total = sum(
        (rec.weighted_revenue_change for rec in recommendations),
        Decimal("0"),
    )
    return to_money(total)


@dataclass(frozen=True, slots=True)
class DemandCurvePoint:
    price: Decimal
    expected_units: float

    @property
    def expected_revenue(self) -> Decimal:
        return to_money(self.price * Decimal(str(self.expected_units)))


class PricePosition(str, Enum):
    BELOW = "below"
    AT = "at"
    ABOVE = "above"

    @staticmethod
    def compare(your_price: Decimal, market_price: Decimal) -> "PricePosition":
        """Derive the position of your_price relative to the market average."""

        difference = your_price - market_price
        if abs(difference) <= PRICE_POSITION_TOLERANCE:
            return PricePosition.AT
        if difference < 0:
            return PricePosition.BELOW
        return PricePosition.ABOVE


@dataclass(frozen=True, slots=True)
class MarketSnapshot:
    """Your price and the competitor prices observed for one product URL."""

    your_price: Decimal
    competitor_prices: List[Decimal]


@dataclass(frozen=True, slots=True)
class CompetitorComparison:
    """
    Price comparison for one product URL against its market snapshot.

    Build instances with `from_prices` so the average and position are
    always derived from the supplied competitor prices.
    """

    product_url: str
    your_price: Decimal
    competitor_prices: List[Decimal]
    avg_market_price: Decimal
    price_position: PricePosition

    @staticmethod
    def from_prices(
        product_url: str,
        your_price: Decimal,
        competitor_prices: Sequence[Decimal],
    ) -> "CompetitorComparison":
        if not competitor_prices:
            raise ValueError(f"No competitor prices available for {product_url}")

        prices = [Decimal(str(price)) for price in competitor_prices]
        avg = to_money(sum(prices, Decimal("0")) / len(prices))
        your_price = to_money(your_price)

        return CompetitorComparison(
            product_url=product_url,
            your_price=your_price,
            competitor_prices=prices,
            avg_market_price=avg,
            price_position=PricePosition.compare(your_price, avg),
        )


class DemandLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True, slots=True)
class SurgeMultipliers:
    """
    Price multiplier per demand level.

    Invariants: all > 0, low <= 1.0 <= high, low <= medium <= high.
    """

    low: float = 0.9
    medium: float = 1.0
    high: float = 1.15

    def __post_init__(self) -> None:
        if min(self.low, self.medium, self.high) <= 0:
            raise ValueError("Surge multipliers must be > 0")
        if not (self.low <= self.medium <= self.high):
            raise ValueError("Surge multipliers must be non-decreasing with demand")
        if not (self.low <= 1.0 <= self.high):
            raise ValueError("Surge multipliers must satisfy low <= 1.0 <= high")

    def for_level(self, level: DemandLevel) -> float:
        if level is DemandLevel.LOW:
            return self.low
        if level is DemandLevel.HIGH:
            return self.high
        return self.medium


@dataclass(frozen=True, slots=True)
class TimeSlot:
    """
    Named daily window [start_hour, end_hour) in UTC hours.

    A slot whose end_hour is <= start_hour wraps past midnight.
    end_hour may be 24 to mean end of day.
    """

    name: str
    start_hour: int
    end_hour: int

    def __post_init__(self) -> None:
        if not 0 <= self.start_hour <= 23:
            raise ValueError("start_hour must be within [0, 23]")
        if not 0 <= self.end_hour <= 24:
            raise ValueError("end_hour must be within [0, 24]")

    def hours(self) -> List[int]:
        """Hours of the day covered by this slot, in order."""

        if self.end_hour > self.start_hour:
            return list(range(self.start_hour, self.end_hour))
        return list(range(self.start_hour, 24)) + list(range(0, self.end_hour))

    @property
    def label(self) -> str:
        return f"{self.name} ({self.start_hour:02d}:00-{self.end_hour:02d}:00)"


@dataclass(frozen=True, slots=True)
class HourlyPerformance:
    """One hourly campaign performance row."""

    recorded_at: datetime
    clicks: int
    conversions: int
    revenue: Decimal

    def __post_init__(self) -> None:
        require_utc_timestamp("recorded_at", self.recorded_at)


@dataclass(frozen=True, slots=True)
class SurgeSlot:
    time_slot: str
    demand_level: DemandLevel
    price_multiplier: float
    expected_revenue: Decimal

    def __post_init__(self) -> None:
        if self.price_multiplier <= 0:
            raise ValueError("price_multiplier must be > 0")
