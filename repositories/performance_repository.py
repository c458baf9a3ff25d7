"""
Campaign performance repository.

Hourly campaign rollups (clicks, conversions, revenue) used for surge
scheduling.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, List, Mapping, Optional

from domain.pricing import HourlyPerformance
from domain.time import parse_utc_datetime
from repositories.client import Client, get_supabase_client, rows_or_raise

_PERFORMANCE_TABLE: str = "campaign_performance"


def _row_to_performance(row: Mapping[str, Any]) -> HourlyPerformance:
    return HourlyPerformance(
        recorded_at=parse_utc_datetime(row["date"]),
        clicks=int(row.get("clicks") or 0),
        conversions=int(row.get("conversions") or 0),
        revenue=Decimal(str(row.get("revenue") or 0)),
    )


class PerformanceRepository:
    def __init__(self, client: Optional[Client] = None) -> None:
        self._client = client or get_supabase_client()

    def get_hourly_performance(self, campaign_id: str, limit: int = 168) -> List[HourlyPerformance]:
        """Most recent hourly rows for a campaign, newest first (168 = 7 days)."""

        response = (
            self._client.table(_PERFORMANCE_TABLE)
            .select("date, clicks, conversions, revenue")
            .eq("campaign_id", campaign_id)
            .order("date", desc=True)
            .limit(limit)
            .execute()
        )
        rows = rows_or_raise(response, "fetch campaign performance")
        return [_row_to_performance(row) for row in rows]


__all__ = ["PerformanceRepository"]
