"""
Domain: Social proof events and display widgets.

Contract excerpts implemented here:
- Proof events are immutable once written; the aggregator only reads them.
- Widgets are ephemeral, built per aggregation call, never persisted.
- Widget priority orders the display sequence (higher first) and
  display_duration_ms is always > 0.
- Each event type maps to human-readable content; unrecognized types produce
  no widget.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from .time import elapsed_whole_minutes, require_utc_timestamp


class ProofEventType(str, Enum):
    PURCHASE = "purchase"
    SIGNUP = "signup"
    VIEW = "view"
    CART_ADD = "cart_add"


class WidgetType(str, Enum):
    RECENT_PURCHASE = "recent_purchase"
    LIVE_VISITORS = "live_visitors"
    TESTIMONIAL = "testimonial"
    COUNTDOWN = "countdown"
    STOCK_ALERT = "stock_alert"


@dataclass(frozen=True, slots=True)
class ProofEvent:
    """
    Immutable record of a campaign activity event.

    event_type is kept as the stored string so that rows written with a type
    this code does not know can still be read (and skipped).
    """

    id: str
    campaign_id: str
    event_type: str
    created_at: datetime
    product_name: Optional[str] = None
    country: Optional[str] = None
    amount: Optional[Decimal] = None

    def __post_init__(self) -> None:
        require_utc_timestamp("created_at", self.created_at)

    @property
    def known_type(self) -> Optional[ProofEventType]:
        try:
            return ProofEventType(self.event_type)
        except ValueError:
            return None


@dataclass(frozen=True, slots=True)
class ClickEvent:
    """A click on one of the owner's affiliate links."""

    id: str
    link_id: str
    clicked_at: datetime

    def __post_init__(self) -> None:
        require_utc_timestamp("clicked_at", self.clicked_at)


@dataclass(frozen=True, slots=True)
class ProofWidget:
    id: str
    type: WidgetType
    content: str
    priority: int
    display_duration_ms: int

    def __post_init__(self) -> None:
        if self.display_duration_ms <= 0:
            raise ValueError("display_duration_ms must be > 0")


@dataclass(frozen=True, slots=True)
class Testimonial:
    id: str
    author: str
    content: str
    rating: int
    verified: bool

    def __post_init__(self) -> None:
        if not 1 <= self.rating <= 5:
            raise ValueError("rating must be within [1, 5]")


def describe_event(event: ProofEvent, now: datetime) -> Optional[str]:
    """
    Human-readable content for an event, or None when the type has no widget.

    minutes ago = floor of elapsed minutes, never negative.
    """

    minutes_ago = elapsed_whole_minutes(event.created_at, now)
    event_type = event.known_type

    if event_type is ProofEventType.PURCHASE:
        return (
            f"Someone from {event.country or 'Unknown'} just purchased "
            f"{event.product_name or 'a product'} {minutes_ago} minutes ago"
        )
    if event_type is ProofEventType.SIGNUP:
        return f"{event.country or 'Someone'} just signed up {minutes_ago} minutes ago"
    if event_type is ProofEventType.CART_ADD:
        return f"{event.product_name or 'This product'} was added to cart {minutes_ago} minutes ago"
    return None


def live_visitors_content(count: int) -> str:
    return f"{count} people are viewing this right now"
