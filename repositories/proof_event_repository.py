"""
Proof event repository (persistence).

Append-only store of social proof events. This module only inserts and
fetches rows; it never updates or deletes existing events.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, List, Mapping, Optional
from uuid import uuid4

from domain.social_proof import ProofEvent, ProofEventType
from domain.time import parse_utc_datetime, to_iso_utc, utc_now
from repositories.client import Client, get_supabase_client, rows_or_raise

logger = logging.getLogger(__name__)

# Supabase table name for proof events.
# Keep this aligned with your database schema.
_PROOF_EVENTS_TABLE: str = "social_proof_events"


def _row_to_event(row: Mapping[str, Any]) -> ProofEvent:
    """Convert a Supabase row into a ProofEvent."""

    amount = row.get("amount")
    return ProofEvent(
        id=str(row["id"]),
        campaign_id=str(row["campaign_id"]),
        event_type=str(row["event_type"]),
        created_at=parse_utc_datetime(row["created_at"]),
        product_name=row.get("product_name"),
        country=row.get("country"),
        amount=Decimal(str(amount)) if amount is not None else None,
    )


class ProofEventRepository:
    """Supabase-backed proof event store."""

    def __init__(self, client: Optional[Client] = None) -> None:
        self._client = client or get_supabase_client()

    def query_events(self, campaign_id: str, limit: int) -> List[ProofEvent]:
        """
        Most recent events for a campaign, newest first.

        Args:
            campaign_id: Campaign identifier
            limit: Maximum number of events to return

        Returns:
            List[ProofEvent] ordered by created_at descending (possibly empty)
        """

        response = (
            self._client.table(_PROOF_EVENTS_TABLE)
            .select("*")
            .eq("campaign_id", campaign_id)
            .not_.is_("created_at", "null")
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        rows = rows_or_raise(response, "fetch proof events")

        events: List[ProofEvent] = []
        for row in rows:
            # created_at is nullable in the schema; an undated event cannot be ranked.
            if row.get("created_at") is None:
                logger.debug("Skipping proof event without created_at", extra={"event_id": row.get("id")})
                continue
            events.append(_row_to_event(row))
        return events

    def insert_event(
        self,
        campaign_id: str,
        event_type: ProofEventType,
        product_name: Optional[str] = None,
        country: Optional[str] = None,
        amount: Optional[Decimal] = None,
    ) -> ProofEvent:
        """
        Append one proof event.

        Returns:
            The ProofEvent as written

        Raises:
            StoreError: If Supabase rejects the insert
        """

        event_id = str(uuid4())
        now = utc_now()

        payload: dict[str, Any] = {
            "id": event_id,
            "campaign_id": campaign_id,
            "event_type": event_type.value,
            "product_name": product_name,
            "country": country,
            "amount": str(amount) if amount is not None else None,
            "created_at": to_iso_utc(now, name="created_at"),
        }

        response = self._client.table(_PROOF_EVENTS_TABLE).insert(payload).execute()
        rows_or_raise(response, "record proof event")

        return ProofEvent(
            id=event_id,
            campaign_id=campaign_id,
            event_type=event_type.value,
            created_at=now,
            product_name=product_name,
            country=country,
            amount=amount,
        )


__all__ = ["ProofEventRepository"]
