"""
Competitor price monitoring.

Compares your price for each product URL against the competitor prices in
that URL's market snapshot.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from domain.pricing import CompetitorComparison
from services.ports import MarketSnapshotSource

logger = logging.getLogger(__name__)

MONITORING_FAILED = "Competitor monitoring failed"


@dataclass(frozen=True, slots=True)
class CompetitorMonitoringResult:
    comparisons: List[CompetitorComparison] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class MissingMarketDataError(Exception):
    """Raised when a product URL has no usable market snapshot."""

    def __init__(self, product_url: str) -> None:
        self.product_url = product_url
        super().__init__(f"No market snapshot with competitor prices for {product_url}")


class CompetitorMonitor:
    def __init__(self, market: MarketSnapshotSource) -> None:
        self._market = market

    def monitor_competitors(self, product_urls: Sequence[str]) -> CompetitorMonitoringResult:
        """
        One comparison per URL, in input order.

        A URL without competitor prices fails the whole call: its market
        average is undefined.
        """
        try:
            comparisons: List[CompetitorComparison] = []
            for url in product_urls:
                snapshot = self._market.get_snapshot(url)
                if snapshot is None or not snapshot.competitor_prices:
                    raise MissingMarketDataError(url)

                comparisons.append(CompetitorComparison.from_prices(
                    product_url=url,
                    your_price=snapshot.your_price,
                    competitor_prices=snapshot.competitor_prices,
                ))

            return CompetitorMonitoringResult(comparisons=comparisons)

        except Exception:
            logger.exception(
                "Competitor monitoring error",
                extra={"url_count": len(product_urls)},
            )
            return CompetitorMonitoringResult(error=MONITORING_FAILED)


__all__ = [
    "CompetitorMonitor",
    "CompetitorMonitoringResult",
    "MissingMarketDataError",
]
