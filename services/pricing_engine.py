"""
Pricing recommendation engine.

Turns each campaign product's price point and price history into a
recommended price via a pluggable demand model, and aggregates the projected
revenue change across products.

Handles:
- Per-product recommendations (all returned, regardless of confidence)
- Relative-price-weighted revenue aggregate
- Revenue-maximising price from a demand curve for a single product
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from domain.demand import (
    DemandModel,
    LinearDemandModel,
    build_demand_curve,
    revenue_maximizing_point,
)
from domain.pricing import DemandCurvePoint, PricingRecommendation, total_revenue_increase
from services.ports import ProductCatalog

logger = logging.getLogger(__name__)

PRICE_HISTORY_LIMIT: int = 30

PRICING_FAILED = "Pricing optimization failed"
PRICE_CALCULATION_FAILED = "Price calculation failed"


@dataclass(frozen=True, slots=True)
class PricingOptimizationResult:
    """
    Result of a pricing optimization.

    total_revenue_increase = sum(expected_revenue_i * relative price change_i).
    On error the payload is empty and total_revenue_increase is 0.
    """
    recommendations: List[PricingRecommendation] = field(default_factory=list)
    total_revenue_increase: Decimal = Decimal("0.00")
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True, slots=True)
class OptimalPriceResult:
    optimal_price: Decimal = Decimal("0.00")
    demand_curve: List[DemandCurvePoint] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class PricingRecommendationEngine:
    """Stateless engine; collaborators are injected at construction."""

    def __init__(
        self,
        catalog: ProductCatalog,
        demand_model: Optional[DemandModel] = None,
        history_limit: int = PRICE_HISTORY_LIMIT,
    ) -> None:
        self._catalog = catalog
        self._demand_model = demand_model or LinearDemandModel()
        self._history_limit = history_limit

    def optimize_pricing(self, campaign_id: str) -> PricingOptimizationResult:
        """
        Recommend a price for every product in a campaign.

        Any fault yields an empty result with an error; partial results are
        never returned.

        Example:
            result = engine.optimize_pricing(campaign_id)
            if result.ok:
                print(f"Projected change: ${result.total_revenue_increase}")
        """
        try:
            products = self._catalog.get_campaign_products(campaign_id)

            recommendations: List[PricingRecommendation] = []
            for product in products:
                history = self._catalog.get_price_history(product.product_id, self._history_limit)
                estimate = self._demand_model.estimate_demand(product, history)

                recommendations.append(PricingRecommendation(
                    product_id=product.product_id,
                    current_price=product.current_price,
                    recommended_price=estimate.recommended_price,
                    expected_revenue=estimate.expected_revenue,
                    price_elasticity=estimate.elasticity,
                    confidence=estimate.confidence,
                ))

            total = total_revenue_increase(recommendations)

            logger.info(
                "Pricing optimization complete",
                extra={
                    "campaign_id": campaign_id,
                    "product_count": len(recommendations),
                    "total_revenue_increase": str(total),
                },
            )

            return PricingOptimizationResult(
                recommendations=recommendations,
                total_revenue_increase=total,
            )

        except Exception:
            logger.exception("Pricing optimization error", extra={"campaign_id": campaign_id})
            return PricingOptimizationResult(error=PRICING_FAILED)

    def calculate_optimal_price(self, campaign_id: str, product_id: str) -> OptimalPriceResult:
        """
        Revenue-maximising price for one product from its demand curve.

        The curve spans 0.7x to 1.3x the current price in 0.1 steps.
        """
        try:
            product = self._catalog.get_campaign_product(campaign_id, product_id)
            if product is None:
                return OptimalPriceResult(error="Product not found")

            history = self._catalog.get_price_history(product_id, self._history_limit)
            if not history:
                return OptimalPriceResult(
                    error="Insufficient data - need price history for this product"
                )

            curve = build_demand_curve(self._demand_model, product, history)
            best = revenue_maximizing_point(curve)

            return OptimalPriceResult(
                optimal_price=best.price if best is not None else Decimal("0.00"),
                demand_curve=curve,
            )

        except Exception:
            logger.exception(
                "Optimal price calculation error",
                extra={"campaign_id": campaign_id, "product_id": product_id},
            )
            return OptimalPriceResult(error=PRICE_CALCULATION_FAILED)


__all__ = [
    "OptimalPriceResult",
    "PricingOptimizationResult",
    "PricingRecommendationEngine",
]
