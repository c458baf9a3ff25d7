"""
Market snapshot repository.

Competitor prices are collected by an external price tracker into the
competitor_prices table, one row per (product_url, competitor). The row
flagged is_own carries your own listed price for the URL.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from domain.pricing import MarketSnapshot
from repositories.client import Client, get_supabase_client, rows_or_raise

_COMPETITOR_PRICES_TABLE: str = "competitor_prices"


class MarketRepository:
    """Supabase-backed market price snapshots."""

    def __init__(self, client: Optional[Client] = None) -> None:
        self._client = client or get_supabase_client()

    def get_snapshot(self, product_url: str) -> Optional[MarketSnapshot]:
        """
        Latest prices observed for a product URL.

        Returns:
            MarketSnapshot, or None if your own price for the URL is unknown
        """

        response = (
            self._client.table(_COMPETITOR_PRICES_TABLE)
            .select("competitor, price, is_own")
            .eq("product_url", product_url)
            .execute()
        )
        rows = rows_or_raise(response, "fetch competitor prices")

        your_price: Optional[Decimal] = None
        competitor_prices: List[Decimal] = []
        for row in rows:
            price = Decimal(str(row["price"]))
            if row.get("is_own"):
                your_price = price
            else:
                competitor_prices.append(price)

        if your_price is None:
            return None

        return MarketSnapshot(your_price=your_price, competitor_prices=competitor_prices)


__all__ = ["MarketRepository"]
