"""
Pytest configuration and shared fakes.

Adds the project root to the Python path so that tests can import the
domain, repositories, services and api packages, and provides in-memory
collaborators plus a fake Supabase client.
"""

import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

# Add the project root to the Python path
# so tests can import domain, repositories, etc.
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from domain.identity import Identity  # noqa: E402
from domain.social_proof import ClickEvent, ProofEvent  # noqa: E402

NOW = datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeIdentityResolver:
    def __init__(self, identity: Optional[Identity] = None, error: Optional[Exception] = None):
        self.identity = identity
        self.error = error

    def get_current_identity(self) -> Optional[Identity]:
        if self.error is not None:
            raise self.error
        return self.identity


class FakeProofEventStore:
    """Append-only list; query returns newest first like the Supabase store."""

    def __init__(self, events: Optional[List[ProofEvent]] = None):
        self.events: List[ProofEvent] = list(events or [])
        self.query_error: Optional[Exception] = None
        self.insert_error: Optional[Exception] = None
        self.queries: List[tuple] = []

    def query_events(self, campaign_id: str, limit: int) -> List[ProofEvent]:
        self.queries.append((campaign_id, limit))
        if self.query_error is not None:
            raise self.query_error
        matching = [e for e in self.events if e.campaign_id == campaign_id]
        matching.sort(key=lambda e: e.created_at, reverse=True)
        return matching[:limit]

    def insert_event(self, campaign_id, event_type, product_name=None, country=None, amount=None):
        if self.insert_error is not None:
            raise self.insert_error
        event = ProofEvent(
            id=f"evt-{len(self.events) + 1}",
            campaign_id=campaign_id,
            event_type=event_type.value,
            created_at=NOW,
            product_name=product_name,
            country=country,
            amount=amount,
        )
        self.events.append(event)
        return event


class FakeClickStore:
    def __init__(self, links_by_user: Optional[Dict[str, List[str]]] = None,
                 clicks: Optional[List[ClickEvent]] = None):
        self.links_by_user = links_by_user or {}
        self.clicks = list(clicks or [])
        self.error: Optional[Exception] = None

    def list_owned_link_ids(self, user_id: str) -> List[str]:
        if self.error is not None:
            raise self.error
        return list(self.links_by_user.get(user_id, []))

    def query_clicks(self, link_ids, since: datetime) -> List[ClickEvent]:
        # Returns every click on the links; the trailing window is applied by the caller too.
        return [c for c in self.clicks if c.link_id in set(link_ids)]


class FakeProductCatalog:
    def __init__(self, products=None, history=None):
        self.products = list(products or [])
        self.history = dict(history or {})
        self.error: Optional[Exception] = None

    def get_campaign_products(self, campaign_id: str):
        if self.error is not None:
            raise self.error
        return list(self.products)

    def get_campaign_product(self, campaign_id: str, product_id: str):
        if self.error is not None:
            raise self.error
        for product in self.products:
            if product.product_id == product_id:
                return product
        return None

    def get_price_history(self, product_id: str, limit: int = 30):
        return list(self.history.get(product_id, []))[:limit]


class FakeMarketSource:
    def __init__(self, snapshots=None):
        self.snapshots = dict(snapshots or {})

    def get_snapshot(self, product_url: str):
        return self.snapshots.get(product_url)


class FakePerformanceSource:
    def __init__(self, rows=None):
        self.rows = list(rows or [])

    def get_hourly_performance(self, campaign_id: str, limit: int = 168):
        return self.rows[:limit]


# ----------------------------------------------------------------------------
# Fake Supabase client (query builder)
# ----------------------------------------------------------------------------

@dataclass
class FakeResponse:
    data: Any = None
    error: Any = None


@dataclass
class FakeQuery:
    table_name: str
    response: FakeResponse
    calls: List[tuple] = field(default_factory=list)

    def _record(self, name: str, *args, **kwargs) -> "FakeQuery":
        self.calls.append((name, args, kwargs))
        return self

    def select(self, *args, **kwargs):
        return self._record("select", *args, **kwargs)

    def insert(self, *args, **kwargs):
        return self._record("insert", *args, **kwargs)

    def eq(self, *args, **kwargs):
        return self._record("eq", *args, **kwargs)

    def in_(self, *args, **kwargs):
        return self._record("in_", *args, **kwargs)

    def gte(self, *args, **kwargs):
        return self._record("gte", *args, **kwargs)

    @property
    def not_(self):
        return self._record("not_")

    def is_(self, *args, **kwargs):
        return self._record("is_", *args, **kwargs)

    def order(self, *args, **kwargs):
        return self._record("order", *args, **kwargs)

    def limit(self, *args, **kwargs):
        return self._record("limit", *args, **kwargs)

    def execute(self) -> FakeResponse:
        self.calls.append(("execute", (), {}))
        return self.response


class FakeSupabaseClient:
    """Returns a canned response per table and records every query."""

    def __init__(self, responses: Optional[Dict[str, FakeResponse]] = None):
        self.responses = responses or {}
        self.queries: List[FakeQuery] = []

    def table(self, name: str) -> FakeQuery:
        query = FakeQuery(name, self.responses.get(name, FakeResponse(data=[])))
        self.queries.append(query)
        return query


def make_event(event_id: str, event_type: str, created_at: datetime, campaign_id: str = "camp-1",
               product_name: Optional[str] = None, country: Optional[str] = None,
               amount: Optional[Decimal] = None) -> ProofEvent:
    return ProofEvent(
        id=event_id,
        campaign_id=campaign_id,
        event_type=event_type,
        created_at=created_at,
        product_name=product_name,
        country=country,
        amount=amount,
    )


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def owner() -> Identity:
    return Identity(user_id="user-1", email="owner@example.com")


@pytest.fixture
def event_store() -> FakeProofEventStore:
    return FakeProofEventStore()


@pytest.fixture
def click_store() -> FakeClickStore:
    return FakeClickStore()

