"""
Pricing optimization facade.

Composes the pricing recommendation engine, competitor monitor and surge
scheduler behind one service gated by the caller's identity. An absent
identity is a normal outcome: the operation returns its empty payload with
NOT_AUTHENTICATED in the error channel.
"""

from __future__ import annotations

import logging
from typing import Sequence

from services.competitor_monitor import CompetitorMonitor, CompetitorMonitoringResult
from services.ports import IdentityResolver
from services.pricing_engine import (
    OptimalPriceResult,
    PricingOptimizationResult,
    PricingRecommendationEngine,
)
from services.surge_scheduler import SurgePricingResult, SurgeScheduler

logger = logging.getLogger(__name__)

NOT_AUTHENTICATED = "Not authenticated"


class PricingOptimizationService:
    def __init__(
        self,
        identity: IdentityResolver,
        engine: PricingRecommendationEngine,
        competitor_monitor: CompetitorMonitor,
        surge_scheduler: SurgeScheduler,
    ) -> None:
        self._identity = identity
        self._engine = engine
        self._competitor_monitor = competitor_monitor
        self._surge_scheduler = surge_scheduler

    def _authenticated(self, operation: str) -> bool:
        try:
            identity = self._identity.get_current_identity()
        except Exception:
            logger.exception("Identity resolution error", extra={"operation": operation})
            return False

        if identity is None:
            logger.info("Unauthenticated pricing request", extra={"operation": operation})
            return False
        return True

    def optimize_pricing(self, campaign_id: str) -> PricingOptimizationResult:
        if not self._authenticated("optimize_pricing"):
            return PricingOptimizationResult(error=NOT_AUTHENTICATED)
        return self._engine.optimize_pricing(campaign_id)

    def calculate_optimal_price(self, campaign_id: str, product_id: str) -> OptimalPriceResult:
        if not self._authenticated("calculate_optimal_price"):
            return OptimalPriceResult(error=NOT_AUTHENTICATED)
        return self._engine.calculate_optimal_price(campaign_id, product_id)

    def monitor_competitors(self, product_urls: Sequence[str]) -> CompetitorMonitoringResult:
        if not self._authenticated("monitor_competitors"):
            return CompetitorMonitoringResult(error=NOT_AUTHENTICATED)
        return self._competitor_monitor.monitor_competitors(product_urls)

    def optimize_surge_pricing(self, campaign_id: str) -> SurgePricingResult:
        if not self._authenticated("optimize_surge_pricing"):
            return SurgePricingResult(error=NOT_AUTHENTICATED)
        return self._surge_scheduler.optimize_surge_pricing(campaign_id)


__all__ = ["NOT_AUTHENTICATED", "PricingOptimizationService"]
