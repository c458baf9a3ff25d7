"""
Click repository for affiliate link ownership and click events.

Read-only: click events are written by the link redirect service, not here.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, List, Mapping, Optional, Sequence

from domain.social_proof import ClickEvent
from domain.time import parse_utc_datetime, to_iso_utc
from repositories.client import Client, get_supabase_client, rows_or_raise

logger = logging.getLogger(__name__)

_LINKS_TABLE: str = "affiliate_links"
_CLICKS_TABLE: str = "click_events"


def _row_to_click(row: Mapping[str, Any]) -> ClickEvent:
    return ClickEvent(
        id=str(row["id"]),
        link_id=str(row["link_id"]),
        clicked_at=parse_utc_datetime(row["clicked_at"]),
    )


class ClickRepository:
    """Supabase-backed click store."""

    def __init__(self, client: Optional[Client] = None) -> None:
        self._client = client or get_supabase_client()

    def list_owned_link_ids(self, user_id: str) -> List[str]:
        """
        IDs of all affiliate links owned by a user.

        Example:
            link_ids = repo.list_owned_link_ids(identity.user_id)
            # Returns: ['7f1c...', '0a9e...']
        """

        response = (
            self._client.table(_LINKS_TABLE)
            .select("id")
            .eq("user_id", user_id)
            .execute()
        )
        rows = rows_or_raise(response, "list affiliate links")
        return [str(row["id"]) for row in rows]

    def query_clicks(self, link_ids: Sequence[str], since: datetime) -> List[ClickEvent]:
        """
        Click events on the given links at or after `since`.

        An empty link set returns no clicks without a round trip.
        """

        if not link_ids:
            return []

        response = (
            self._client.table(_CLICKS_TABLE)
            .select("id, link_id, clicked_at")
            .in_("link_id", list(link_ids))
            .gte("clicked_at", to_iso_utc(since, name="since"))
            .execute()
        )
        rows = rows_or_raise(response, "fetch click events")

        clicks: List[ClickEvent] = []
        for row in rows:
            if row.get("clicked_at") is None:
                logger.debug("Skipping click event without clicked_at", extra={"click_id": row.get("id")})
                continue
            clicks.append(_row_to_click(row))
        return clicks


__all__ = ["ClickRepository"]
