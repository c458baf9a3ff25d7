"""
Testimonial repository.

Per-campaign testimonials persisted in Supabase. Can replace the static
testimonial feed without changing its return shape.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from domain.social_proof import Testimonial
from repositories.client import Client, get_supabase_client, rows_or_raise

_TESTIMONIALS_TABLE: str = "testimonials"


def _row_to_testimonial(row: Mapping[str, Any]) -> Testimonial:
    return Testimonial(
        id=str(row["id"]),
        author=str(row["author"]),
        content=str(row["content"]),
        rating=int(row["rating"]),
        verified=bool(row.get("verified", False)),
    )


class TestimonialRepository:
    """Supabase-backed per-campaign testimonial feed."""

    def __init__(self, client: Optional[Client] = None) -> None:
        self._client = client or get_supabase_client()

    def list_testimonials(self, campaign_id: str) -> List[Testimonial]:
        response = (
            self._client.table(_TESTIMONIALS_TABLE)
            .select("id, author, content, rating, verified")
            .eq("campaign_id", campaign_id)
            .order("created_at", desc=True)
            .execute()
        )
        rows = rows_or_raise(response, "fetch testimonials")
        return [_row_to_testimonial(row) for row in rows]


__all__ = ["TestimonialRepository"]
