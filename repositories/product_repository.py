"""
Product repository for campaign price points and price history.

Fetches the products attached to a campaign (current price, baseline units,
price bounds) and each product's observed (price, units sold) history.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, List, Mapping, Optional

from domain.pricing import CampaignProduct, PricePoint
from domain.time import parse_utc_datetime
from repositories.client import Client, get_supabase_client, rows_or_raise

_PRODUCTS_TABLE: str = "campaign_products"
_PRICE_HISTORY_TABLE: str = "product_price_history"


def _optional_decimal(value: Any) -> Optional[Decimal]:
    return Decimal(str(value)) if value is not None else None


def _row_to_product(row: Mapping[str, Any]) -> CampaignProduct:
    return CampaignProduct(
        product_id=str(row["product_id"]),
        product_name=row.get("product_name"),
        current_price=Decimal(str(row["current_price"])),
        units_sold=float(row.get("units_sold") or 0),
        min_price=_optional_decimal(row.get("min_price")),
        max_price=_optional_decimal(row.get("max_price")),
    )


def _row_to_price_point(row: Mapping[str, Any]) -> PricePoint:
    return PricePoint(
        price=Decimal(str(row["price"])),
        units_sold=float(row.get("units_sold") or 0),
        recorded_at=parse_utc_datetime(row["recorded_at"]) if row.get("recorded_at") else None,
    )


class ProductRepository:
    """Supabase-backed campaign product catalog (read-only)."""

    def __init__(self, client: Optional[Client] = None) -> None:
        self._client = client or get_supabase_client()

    def get_campaign_products(self, campaign_id: str) -> List[CampaignProduct]:
        """
        All products attached to a campaign.

        Returns:
            List[CampaignProduct] (possibly empty)
        """

        response = (
            self._client.table(_PRODUCTS_TABLE)
            .select("product_id, product_name, current_price, units_sold, min_price, max_price")
            .eq("campaign_id", campaign_id)
            .execute()
        )
        rows = rows_or_raise(response, "fetch campaign products")
        return [_row_to_product(row) for row in rows]

    def get_campaign_product(self, campaign_id: str, product_id: str) -> Optional[CampaignProduct]:
        """A single campaign product, or None if it is not attached to the campaign."""

        response = (
            self._client.table(_PRODUCTS_TABLE)
            .select("product_id, product_name, current_price, units_sold, min_price, max_price")
            .eq("campaign_id", campaign_id)
            .eq("product_id", product_id)
            .limit(1)
            .execute()
        )
        rows = rows_or_raise(response, "fetch campaign product")

        if not rows:
            return None

        return _row_to_product(rows[0])

    def get_price_history(self, product_id: str, limit: int = 30) -> List[PricePoint]:
        """
        Most recent price observations for a product, newest first.

        Example:
            history = repo.get_price_history("prod-1")
            # Returns: [PricePoint(price=Decimal('49.99'), units_sold=164.0, ...), ...]
        """

        response = (
            self._client.table(_PRICE_HISTORY_TABLE)
            .select("price, units_sold, recorded_at")
            .eq("product_id", product_id)
            .order("recorded_at", desc=True)
            .limit(limit)
            .execute()
        )
        rows = rows_or_raise(response, "fetch price history")
        return [_row_to_price_point(row) for row in rows]


__all__ = ["ProductRepository"]
