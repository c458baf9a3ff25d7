"""
Social proof aggregation service.

Converts a campaign's recent proof events and the owner's recent link clicks
into a short, prioritized list of display widgets.

Handles:
- Recent activity widgets from the newest proof events (fetch 10, show 3)
- Live visitor widget from clicks in a trailing 5 minute window
- Event ingestion (append-only)
- Testimonial feed (static by default, substitutable per campaign)

Reads are "as of query time": an event tracked concurrently with an
aggregation may or may not be included.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable, Iterator, List, Optional

from domain.identity import Identity
from domain.social_proof import (
    ProofEventType,
    ProofWidget,
    Testimonial,
    WidgetType,
    describe_event,
    live_visitors_content,
)
from domain.time import utc_now
from domain.windowing import count_in_trailing_window, window_start
from services.ports import ClickStore, IdentityResolver, ProofEventStore, TestimonialSource

logger = logging.getLogger(__name__)

# Events fetched per aggregation, newest first by created_at.
PROOF_EVENT_FETCH_LIMIT: int = 10
# Only the newest events up to this cap become widgets.
DISPLAYED_EVENT_LIMIT: int = 3

RECENT_ACTIVITY_TOP_PRIORITY: int = 10
RECENT_ACTIVITY_DURATION_MS: int = 5000

LIVE_VISITOR_WINDOW: timedelta = timedelta(minutes=5)
LIVE_VISITOR_PRIORITY: int = 8
LIVE_VISITOR_DURATION_MS: int = 8000

SOCIAL_PROOF_FAILED = "Failed to generate social proof"
TESTIMONIALS_FAILED = "Failed to fetch testimonials"

Clock = Callable[[], datetime]


@dataclass(frozen=True, slots=True)
class SocialProofResult:
    """
    Widgets ordered by priority, highest first.

    A non-null error means the widget list is partial or empty; callers
    should proceed without (or with fewer) social proof widgets.
    """
    widgets: List[ProofWidget] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True, slots=True)
class TrackEventRequest:
    campaign_id: str
    event_type: str
    product_name: Optional[str] = None
    country: Optional[str] = None
    amount: Optional[Decimal] = None


@dataclass(frozen=True, slots=True)
class TrackEventResult:
    success: bool
    error: Optional[str] = None


@dataclass(frozen=True, slots=True)
class TestimonialsResult:
    testimonials: List[Testimonial] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ProofEventAggregator:
    """Turns the newest proof events of a campaign into recent activity widgets."""

    def __init__(
        self,
        events: ProofEventStore,
        fetch_limit: int = PROOF_EVENT_FETCH_LIMIT,
        display_limit: int = DISPLAYED_EVENT_LIMIT,
    ) -> None:
        if display_limit > fetch_limit:
            raise ValueError("display_limit must be <= fetch_limit")
        self._events = events
        self._fetch_limit = fetch_limit
        self._display_limit = display_limit

    def widgets(self, campaign_id: str, now: datetime) -> Iterator[ProofWidget]:
        """
        Yield widgets for the newest events, newest first.

        Priority is RECENT_ACTIVITY_TOP_PRIORITY minus the event's recency rank
        among the displayed events, so it strictly decreases. Events whose
        type has no widget are skipped but still consume their rank.
        """

        events = self._events.query_events(campaign_id, self._fetch_limit)
        events = sorted(events, key=lambda event: event.created_at, reverse=True)

        for rank, event in enumerate(events[: self._display_limit]):
            content = describe_event(event, now)
            if content is None:
                logger.debug(
                    "Skipping proof event with no widget mapping",
                    extra={"event_id": event.id, "event_type": event.event_type},
                )
                continue

            yield ProofWidget(
                id=f"{WidgetType.RECENT_PURCHASE.value}_{rank}",
                type=WidgetType.RECENT_PURCHASE,
                content=content,
                priority=RECENT_ACTIVITY_TOP_PRIORITY - rank,
                display_duration_ms=RECENT_ACTIVITY_DURATION_MS,
            )


class LiveVisitorEstimator:
    """Approximates concurrent interest from the owner's recent link clicks."""

    def __init__(self, clicks: ClickStore, window: timedelta = LIVE_VISITOR_WINDOW) -> None:
        self._clicks = clicks
        self._window = window

    def count_active_visitors(self, identity: Identity, now: datetime) -> int:
        link_ids = self._clicks.list_owned_link_ids(identity.user_id)
        if not link_ids:
            return 0

        clicks = self._clicks.query_clicks(link_ids, window_start(now, self._window))
        return count_in_trailing_window(clicks, lambda click: click.clicked_at, now, self._window)

    def widget(self, identity: Optional[Identity], now: datetime) -> Optional[ProofWidget]:
        """Live visitor widget, or None without an identity or recent clicks."""

        if identity is None:
            return None

        count = self.count_active_visitors(identity, now)
        if count <= 0:
            return None

        return ProofWidget(
            id=WidgetType.LIVE_VISITORS.value,
            type=WidgetType.LIVE_VISITORS,
            content=live_visitors_content(count),
            priority=LIVE_VISITOR_PRIORITY,
            display_duration_ms=LIVE_VISITOR_DURATION_MS,
        )


class StaticTestimonialSource:
    """Fixed, non-personalized testimonials shared by every campaign."""

    _TESTIMONIALS: tuple[Testimonial, ...] = (
        Testimonial(
            id="test_1",
            author="Sarah M.",
            content="This campaign system generated $5,000 in sales in just 2 weeks!",
            rating=5,
            verified=True,
        ),
        Testimonial(
            id="test_2",
            author="John D.",
            content="The one-click setup is incredible. I was making money within an hour.",
            rating=5,
            verified=True,
        ),
        Testimonial(
            id="test_3",
            author="Emily R.",
            content="Best ROI I've ever seen from an affiliate campaign. Highly recommend!",
            rating=5,
            verified=True,
        ),
    )

    def list_testimonials(self, campaign_id: str) -> List[Testimonial]:
        return list(self._TESTIMONIALS)


class SocialProofService:
    def __init__(
        self,
        identity: IdentityResolver,
        events: ProofEventStore,
        clicks: ClickStore,
        testimonials: Optional[TestimonialSource] = None,
        clock: Clock = utc_now,
    ) -> None:
        self._identity = identity
        self._events = events
        self._aggregator = ProofEventAggregator(events)
        self._live_visitors = LiveVisitorEstimator(clicks)
        self._testimonials = testimonials or StaticTestimonialSource()
        self._clock = clock

    def generate_social_proof(self, campaign_id: str) -> SocialProofResult:
        """
        Ranked widgets for a campaign.

        Faults keep the widgets already built and add an error string.

        Example:
            result = service.generate_social_proof(campaign_id)
            for widget in result.widgets:
                show(widget.content, widget.display_duration_ms)
        """
        now = self._clock()
        widgets: List[ProofWidget] = []

        try:
            for widget in self._aggregator.widgets(campaign_id, now):
                widgets.append(widget)

            live = self._live_visitors.widget(self._identity.get_current_identity(), now)
            if live is not None:
                widgets.append(live)

        except Exception:
            logger.exception(
                "Social proof generation error",
                extra={"campaign_id": campaign_id, "widgets_built": len(widgets)},
            )
            return SocialProofResult(widgets=_ranked(widgets), error=SOCIAL_PROOF_FAILED)

        return SocialProofResult(widgets=_ranked(widgets))

    def track_event(self, request: TrackEventRequest) -> TrackEventResult:
        """
        Append one proof event.

        Returns success=False with the store's message on failure; never raises.
        """
        try:
            event_type = ProofEventType(request.event_type)
        except ValueError:
            return TrackEventResult(success=False, error=f"Invalid event type: {request.event_type}")

        try:
            self._events.insert_event(
                campaign_id=request.campaign_id,
                event_type=event_type,
                product_name=request.product_name,
                country=request.country,
                amount=request.amount,
            )
        except Exception as e:
            logger.exception(
                "Failed to track proof event",
                extra={"campaign_id": request.campaign_id, "event_type": event_type.value},
            )
            return TrackEventResult(success=False, error=str(e))

        return TrackEventResult(success=True)

    def get_testimonials(self, campaign_id: str) -> TestimonialsResult:
        try:
            return TestimonialsResult(testimonials=self._testimonials.list_testimonials(campaign_id))
        except Exception:
            logger.exception("Testimonial fetch error", extra={"campaign_id": campaign_id})
            return TestimonialsResult(error=TESTIMONIALS_FAILED)


def _ranked(widgets: List[ProofWidget]) -> List[ProofWidget]:
    """
    Order widgets by priority, highest first.

    Priorities can tie: the live visitor widget (8) shares its priority with
    the third recent activity widget (10 - 2). The sort is stable, so ties
    keep construction order and event widgets come before the live widget.
    """
    return sorted(widgets, key=lambda widget: widget.priority, reverse=True)


__all__ = [
    "DISPLAYED_EVENT_LIMIT",
    "LIVE_VISITOR_WINDOW",
    "PROOF_EVENT_FETCH_LIMIT",
    "LiveVisitorEstimator",
    "ProofEventAggregator",
    "SocialProofResult",
    "SocialProofService",
    "StaticTestimonialSource",
    "TestimonialsResult",
    "TrackEventRequest",
    "TrackEventResult",
]
