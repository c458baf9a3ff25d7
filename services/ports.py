"""
Collaborator interfaces consumed by the services.

The Supabase repositories implement these; tests substitute in-memory fakes.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Protocol, Sequence

from domain.identity import Identity
from domain.pricing import CampaignProduct, HourlyPerformance, MarketSnapshot, PricePoint
from domain.social_proof import ClickEvent, ProofEvent, ProofEventType, Testimonial


class IdentityResolver(Protocol):
    def get_current_identity(self) -> Optional[Identity]: ...


class ProofEventStore(Protocol):
    def query_events(self, campaign_id: str, limit: int) -> List[ProofEvent]: ...

    def insert_event(
        self,
        campaign_id: str,
        event_type: ProofEventType,
        product_name: Optional[str] = None,
        country: Optional[str] = None,
        amount: Optional[Decimal] = None,
    ) -> ProofEvent: ...


class ClickStore(Protocol):
    def list_owned_link_ids(self, user_id: str) -> List[str]: ...

    def query_clicks(self, link_ids: Sequence[str], since: datetime) -> List[ClickEvent]: ...


class ProductCatalog(Protocol):
    def get_campaign_products(self, campaign_id: str) -> List[CampaignProduct]: ...

    def get_campaign_product(self, campaign_id: str, product_id: str) -> Optional[CampaignProduct]: ...

    def get_price_history(self, product_id: str, limit: int = 30) -> List[PricePoint]: ...


class MarketSnapshotSource(Protocol):
    def get_snapshot(self, product_url: str) -> Optional[MarketSnapshot]: ...


class PerformanceSource(Protocol):
    def get_hourly_performance(self, campaign_id: str, limit: int = 168) -> List[HourlyPerformance]: ...


class TestimonialSource(Protocol):
    def list_testimonials(self, campaign_id: str) -> List[Testimonial]: ...
