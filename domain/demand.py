"""
Domain: Demand modelling for price recommendations (pure).

The pricing engine depends only on the DemandModel protocol, so a trained
statistical or learned model can replace the default without touching how
recommendations are aggregated.

Default model (LinearDemandModel):
- Demand is linear in price: q(p) = a - b * p, b > 0.
- a and b are fitted by ordinary least squares over the price history when
  at least MIN_DISTINCT_PRICES distinct prices were observed and the fitted
  slope is negative.
- Otherwise a prior elasticity is anchored at the current price and baseline
  units: b = -e * q0 / p0, a = q0 + b * p0.
- Revenue p * q(p) peaks at p* = a / (2b); p* is clamped to the search band
  around the current price and to the product's own price bounds.
- Elasticity is the point elasticity at the current price: -b * p0 / q0.
"""

from __future__ import annotations

import logging
import statistics
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Protocol, Sequence

from .pricing import CampaignProduct, DemandCurvePoint, PricePoint, to_money

logger = logging.getLogger(__name__)

PRIOR_ELASTICITY: float = -1.5
PRIOR_CONFIDENCE: float = 25.0
MIN_DISTINCT_PRICES: int = 3
FULL_CONFIDENCE_OBSERVATIONS: int = 30

# Recommended prices stay within this band around the current price.
MIN_PRICE_RATIO: float = 0.7
MAX_PRICE_RATIO: float = 1.3

# Demand curve grid: 0.7, 0.8, ..., 1.3 times the current price.
CURVE_MULTIPLIERS: tuple[float, ...] = (0.7, 0.8, 0.9, 1.0, 1.1, 1.2, 1.3)

_MAX_ELASTICITY: float = -0.001


@dataclass(frozen=True, slots=True)
class DemandEstimate:
    recommended_price: Decimal
    expected_revenue: Decimal
    elasticity: float
    confidence: float


class DemandModel(Protocol):
    def estimate_demand(
        self, product: CampaignProduct, history: Sequence[PricePoint]
    ) -> DemandEstimate:
        """Estimate the revenue-optimal price for a product's current price point."""
        ...

    def expected_units(
        self, product: CampaignProduct, history: Sequence[PricePoint], price: Decimal
    ) -> float:
        """Expected units sold at `price`."""
        ...


@dataclass(frozen=True, slots=True)
class LinearDemandFit:
    """q(p) = intercept - slope * p, with slope > 0 when demand is usable."""

    intercept: float
    slope: float
    confidence: float
    fitted: bool

    def units_at(self, price: float) -> float:
        return max(0.0, self.intercept - self.slope * price)


class LinearDemandModel:
    """Least-squares linear demand with a prior-elasticity fallback."""

    def __init__(
        self,
        prior_elasticity: float = PRIOR_ELASTICITY,
        prior_confidence: float = PRIOR_CONFIDENCE,
        min_distinct_prices: int = MIN_DISTINCT_PRICES,
    ) -> None:
        if not prior_elasticity < 0:
            raise ValueError("prior_elasticity must be < 0")
        self.prior_elasticity = prior_elasticity
        self.prior_confidence = prior_confidence
        self.min_distinct_prices = min_distinct_prices

    def fit(self, product: CampaignProduct, history: Sequence[PricePoint]) -> LinearDemandFit:
        """Fit demand from history, falling back to the prior elasticity."""

        prices = [float(point.price) for point in history]
        units = [float(point.units_sold) for point in history]

        if len(set(prices)) >= self.min_distinct_prices:
            slope, intercept = statistics.linear_regression(prices, units)
            if slope < 0:
                r_squared = statistics.correlation(prices, units) ** 2
                coverage = min(1.0, len(prices) / FULL_CONFIDENCE_OBSERVATIONS)
                return LinearDemandFit(
                    intercept=intercept,
                    slope=-slope,
                    confidence=round(100.0 * r_squared * coverage, 1),
                    fitted=True,
                )
            logger.debug(
                "Fitted demand slope is not negative; using prior elasticity",
                extra={"product_id": product.product_id, "slope": slope},
            )

        p0 = float(product.current_price)
        q0 = self._baseline_units(product, history)
        slope = -self.prior_elasticity * q0 / p0
        return LinearDemandFit(
            intercept=q0 + slope * p0,
            slope=slope,
            confidence=self.prior_confidence if q0 > 0 else 0.0,
            fitted=False,
        )

    def estimate_demand(
        self, product: CampaignProduct, history: Sequence[PricePoint]
    ) -> DemandEstimate:
        fit = self.fit(product, history)
        p0 = float(product.current_price)
        q0 = fit.units_at(p0)

        if fit.slope <= 0 or q0 <= 0:
            # No demand signal: keep the current price.
            return DemandEstimate(
                recommended_price=to_money(product.current_price),
                expected_revenue=to_money(p0 * q0),
                elasticity=self.prior_elasticity,
                confidence=0.0,
            )

        optimal = fit.intercept / (2 * fit.slope)
        recommended = to_money(self._clamp(optimal, product))
        expected_units = fit.units_at(float(recommended))
        elasticity = min(round(-fit.slope * p0 / q0, 3), _MAX_ELASTICITY)

        return DemandEstimate(
            recommended_price=recommended,
            expected_revenue=to_money(float(recommended) * expected_units),
            elasticity=elasticity,
            confidence=max(0.0, min(100.0, fit.confidence)),
        )

    def expected_units(
        self, product: CampaignProduct, history: Sequence[PricePoint], price: Decimal
    ) -> float:
        return self.fit(product, history).units_at(float(price))

    @staticmethod
    def _baseline_units(product: CampaignProduct, history: Sequence[PricePoint]) -> float:
        if product.units_sold > 0:
            return float(product.units_sold)
        if history:
            return statistics.fmean(float(point.units_sold) for point in history)
        return 0.0

    @staticmethod
    def _clamp(price: float, product: CampaignProduct) -> float:
        p0 = float(product.current_price)
        price = max(p0 * MIN_PRICE_RATIO, min(p0 * MAX_PRICE_RATIO, price))
        # Product bounds win over the search band.
        if product.min_price is not None:
            price = max(price, float(product.min_price))
        if product.max_price is not None:
            price = min(price, float(product.max_price))
        return price


def build_demand_curve(
    model: DemandModel,
    product: CampaignProduct,
    history: Sequence[PricePoint],
    multipliers: Sequence[float] = CURVE_MULTIPLIERS,
) -> List[DemandCurvePoint]:
    """Expected units at each multiple of the current price."""

    curve: List[DemandCurvePoint] = []
    for multiplier in multipliers:
        price = to_money(product.current_price * Decimal(str(multiplier)))
        units = model.expected_units(product, history, price)
        curve.append(DemandCurvePoint(price=price, expected_units=round(units, 2)))
    return curve


def revenue_maximizing_point(curve: Sequence[DemandCurvePoint]) -> Optional[DemandCurvePoint]:
    """Point with the highest expected revenue; ties keep the earliest (lowest price)."""

    best: Optional[DemandCurvePoint] = None
    for point in curve:
        if best is None or point.expected_revenue > best.expected_revenue:
            best = point
    return best
