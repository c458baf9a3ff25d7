"""
Tests for `services/social_proof_service.py`.

Covers:
- Fetch 10 newest events, widgetize at most 3, newest first, strictly decreasing priority.
- Unmapped event types are skipped silently.
- Live visitor widget appears iff identity present and recent owned-link clicks > 0.
- Live visitor priority ties with the third event widget; ties keep construction order.
- Faults keep widgets already built and report an error.
- Undated rows in the Supabase stores are dropped, not treated as faults.
- track_event success, invalid type and store failure.
- Testimonials are static by default, substitutable, and idempotent.
"""

from __future__ import annotations

from datetime import timedelta

import pytest

from conftest import (
    NOW,
    FakeClickStore,
    FakeIdentityResolver,
    FakeProofEventStore,
    FakeResponse,
    FakeSupabaseClient,
    make_event,
)
from domain.social_proof import ClickEvent, ProofEventType, Testimonial, WidgetType
from repositories.click_repository import ClickRepository
from repositories.proof_event_repository import ProofEventRepository
from services.social_proof_service import (
    DISPLAYED_EVENT_LIMIT,
    PROOF_EVENT_FETCH_LIMIT,
    SOCIAL_PROOF_FAILED,
    SocialProofService,
    TrackEventRequest,
)


def _service(events=None, clicks=None, identity=None, testimonials=None) -> SocialProofService:
    return SocialProofService(
        identity=identity or FakeIdentityResolver(),
        events=events or FakeProofEventStore(),
        clicks=clicks or FakeClickStore(),
        testimonials=testimonials,
        clock=lambda: NOW,
    )


def _five_events() -> FakeProofEventStore:
    return FakeProofEventStore([
        make_event("e1", "purchase", NOW - timedelta(minutes=50), product_name="Oldest"),
        make_event("e2", "signup", NOW - timedelta(minutes=1), country="Peru"),
        make_event("e3", "cart_add", NOW - timedelta(minutes=30), product_name="Lamp"),
        make_event("e4", "purchase", NOW - timedelta(minutes=10), country="Kenya", product_name="Mug"),
        make_event("e5", "purchase", NOW - timedelta(minutes=40)),
    ])


def _owned_clicks() -> FakeClickStore:
    return FakeClickStore(
        links_by_user={"user-1": ["link-a", "link-b"]},
        clicks=[
            ClickEvent(id="c1", link_id="link-a", clicked_at=NOW - timedelta(minutes=1)),
            ClickEvent(id="c2", link_id="link-b", clicked_at=NOW - timedelta(minutes=4)),
            ClickEvent(id="c3", link_id="link-b", clicked_at=NOW - timedelta(minutes=6)),
            ClickEvent(id="c4", link_id="link-other", clicked_at=NOW),
        ],
    )


# ----------------------------------------------------------------------------
# Recent activity widgets
# ----------------------------------------------------------------------------

def test_fetches_ten_and_shows_three_newest() -> None:
    """Verify 10 events are requested and only the 3 newest become widgets."""

    store = _five_events()
    result = _service(events=store).generate_social_proof("camp-1")

    assert result.error is None
    assert store.queries == [("camp-1", PROOF_EVENT_FETCH_LIMIT)]
    assert len(result.widgets) == DISPLAYED_EVENT_LIMIT
    assert [w.content for w in result.widgets] == [
        "Peru just signed up 1 minutes ago",
        "Someone from Kenya just purchased Mug 10 minutes ago",
        "Lamp was added to cart 30 minutes ago",
    ]


def test_event_priorities_strictly_decrease_newest_first() -> None:
    """Verify recent activity priorities are 10, 9, 8 in recency order."""

    result = _service(events=_five_events()).generate_social_proof("camp-1")

    priorities = [w.priority for w in result.widgets]
    assert priorities == [10, 9, 8]
    assert all(a > b for a, b in zip(priorities, priorities[1:]))


def test_event_widgets_share_type_and_duration() -> None:
    """Verify event widgets are recent_purchase, 5000 ms, with unique ids."""

    result = _service(events=_five_events()).generate_social_proof("camp-1")

    assert {w.type for w in result.widgets} == {WidgetType.RECENT_PURCHASE}
    assert {w.display_duration_ms for w in result.widgets} == {5000}
    assert len({w.id for w in result.widgets}) == len(result.widgets)


def test_unmapped_event_is_skipped_without_error() -> None:
    """Verify a view event yields no widget but still consumes its rank."""

    store = FakeProofEventStore([
        make_event("e1", "view", NOW - timedelta(minutes=1)),
        make_event("e2", "purchase", NOW - timedelta(minutes=2)),
        make_event("e3", "signup", NOW - timedelta(minutes=3)),
        make_event("e4", "purchase", NOW - timedelta(minutes=4)),
    ])

    result = _service(events=store).generate_social_proof("camp-1")

    assert result.error is None
    # The view consumed the newest slot; the fourth event is never shown.
    assert [w.priority for w in result.widgets] == [9, 8]


def test_other_campaigns_events_are_ignored() -> None:
    """Verify events of another campaign produce no widgets."""

    store = FakeProofEventStore([make_event("e1", "purchase", NOW, campaign_id="camp-2")])
    result = _service(events=store).generate_social_proof("camp-1")

    assert result.widgets == []
    assert result.error is None


def test_future_event_renders_zero_minutes() -> None:
    """Verify clock skew renders as 0 minutes ago."""

    store = FakeProofEventStore([make_event("e1", "signup", NOW + timedelta(minutes=5))])
    result = _service(events=store).generate_social_proof("camp-1")

    assert result.widgets[0].content == "Someone just signed up 0 minutes ago"


# ----------------------------------------------------------------------------
# Live visitors
# ----------------------------------------------------------------------------

def test_live_widget_counts_owned_clicks_in_trailing_window(owner) -> None:
    """Verify only the owner's clicks from the last 5 minutes are counted."""

    result = _service(clicks=_owned_clicks(), identity=FakeIdentityResolver(owner)).generate_social_proof("camp-1")

    live = [w for w in result.widgets if w.type is WidgetType.LIVE_VISITORS]
    assert len(live) == 1
    assert live[0].content == "2 people are viewing this right now"
    assert live[0].priority == 8
    assert live[0].display_duration_ms == 8000


def test_no_live_widget_without_identity() -> None:
    """Verify an anonymous caller gets no live visitor widget and no error."""

    result = _service(clicks=_owned_clicks()).generate_social_proof("camp-1")

    assert result.error is None
    assert all(w.type is not WidgetType.LIVE_VISITORS for w in result.widgets)


def test_no_live_widget_when_owner_has_no_links(owner) -> None:
    """Verify an owner without affiliate links gets no live visitor widget."""

    clicks = FakeClickStore(links_by_user={}, clicks=_owned_clicks().clicks)
    result = _service(clicks=clicks, identity=FakeIdentityResolver(owner)).generate_social_proof("camp-1")

    assert result.widgets == []
    assert result.error is None


def test_no_live_widget_when_no_recent_clicks(owner) -> None:
    """Verify clicks older than the window produce no live visitor widget."""

    clicks = FakeClickStore(
        links_by_user={"user-1": ["link-a"]},
        clicks=[ClickEvent(id="c1", link_id="link-a", clicked_at=NOW - timedelta(minutes=30))],
    )
    result = _service(clicks=clicks, identity=FakeIdentityResolver(owner)).generate_social_proof("camp-1")

    assert result.widgets == []


def test_live_widget_ties_third_event_and_follows_it(owner) -> None:
    """Verify the live widget shares priority 8 with the third event and is listed after it."""

    result = _service(
        events=_five_events(),
        clicks=_owned_clicks(),
        identity=FakeIdentityResolver(owner),
    ).generate_social_proof("camp-1")

    assert [(w.id, w.priority) for w in result.widgets] == [
        ("recent_purchase_0", 10),
        ("recent_purchase_1", 9),
        ("recent_purchase_2", 8),
        ("live_visitors", 8),
    ]


# ----------------------------------------------------------------------------
# Degradation
# ----------------------------------------------------------------------------

def test_event_store_failure_returns_empty_with_error() -> None:
    """Verify an event store fault yields no widgets and the error string."""

    store = FakeProofEventStore()
    store.query_error = RuntimeError("connection refused")

    result = _service(events=store).generate_social_proof("camp-1")

    assert result.widgets == []
    assert result.error == SOCIAL_PROOF_FAILED


def test_click_store_failure_keeps_event_widgets(owner) -> None:
    """Verify a click store fault keeps the event widgets already built."""

    clicks = FakeClickStore()
    clicks.error = RuntimeError("timeout")

    result = _service(
        events=_five_events(),
        clicks=clicks,
        identity=FakeIdentityResolver(owner),
    ).generate_social_proof("camp-1")

    assert len(result.widgets) == 3
    assert result.error == SOCIAL_PROOF_FAILED


def test_identity_failure_keeps_event_widgets() -> None:
    """Verify an identity fault keeps the event widgets already built."""

    result = _service(
        events=_five_events(),
        identity=FakeIdentityResolver(error=RuntimeError("auth down")),
    ).generate_social_proof("camp-1")

    assert len(result.widgets) == 3
    assert result.error == SOCIAL_PROOF_FAILED


def test_undated_rows_do_not_fail_aggregation(owner) -> None:
    """Verify null created_at / clicked_at rows from Supabase are dropped, not errors."""

    client = FakeSupabaseClient({
        "social_proof_events": FakeResponse(data=[
            {"id": "e0", "campaign_id": "camp-1", "event_type": "purchase", "created_at": None},
            {
                "id": "e1",
                "campaign_id": "camp-1",
                "event_type": "signup",
                "created_at": "2025-06-01T11:58:00Z",
                "country": "Peru",
            },
        ]),
        "affiliate_links": FakeResponse(data=[{"id": "link-a"}]),
        "click_events": FakeResponse(data=[
            {"id": "c0", "link_id": "link-a", "clicked_at": None},
            {"id": "c1", "link_id": "link-a", "clicked_at": "2025-06-01T11:59:00.5+00:00"},
        ]),
    })

    result = SocialProofService(
        identity=FakeIdentityResolver(owner),
        events=ProofEventRepository(client),
        clicks=ClickRepository(client),
        clock=lambda: NOW,
    ).generate_social_proof("camp-1")

    assert result.error is None
    assert [w.content for w in result.widgets] == [
        "Peru just signed up 2 minutes ago",
        "1 people are viewing this right now",
    ]


# ----------------------------------------------------------------------------
# track_event
# ----------------------------------------------------------------------------

def test_track_event_appends_event() -> None:
    """Verify a valid event is appended to the store."""

    store = FakeProofEventStore()
    result = _service(events=store).track_event(
        TrackEventRequest(campaign_id="camp-1", event_type="purchase", product_name="Mug", country="Peru")
    )

    assert result.success is True
    assert result.error is None
    assert len(store.events) == 1
    assert store.events[0].event_type == ProofEventType.PURCHASE.value


def test_track_event_rejects_invalid_type() -> None:
    """Verify an unknown event type is rejected without writing."""

    store = FakeProofEventStore()
    result = _service(events=store).track_event(
        TrackEventRequest(campaign_id="camp-1", event_type="refund")
    )

    assert result.success is False
    assert result.error == "Invalid event type: refund"
    assert store.events == []


def test_track_event_store_failure_returns_store_message() -> None:
    """Verify a store fault is reported with the store's message."""

    store = FakeProofEventStore()
    store.insert_error = RuntimeError("Failed to record proof event: duplicate key")

    result = _service(events=store).track_event(
        TrackEventRequest(campaign_id="camp-1", event_type="signup")
    )

    assert result.success is False
    assert result.error == "Failed to record proof event: duplicate key"


def test_track_then_generate_never_errors() -> None:
    """Verify a tracked event does not break the next aggregation."""

    store = FakeProofEventStore()
    service = _service(events=store)

    assert service.track_event(TrackEventRequest(campaign_id="camp-1", event_type="cart_add")).success
    result = service.generate_social_proof("camp-1")

    assert result.error is None


# ----------------------------------------------------------------------------
# Testimonials
# ----------------------------------------------------------------------------

def test_static_testimonial_feed() -> None:
    """Verify the default feed returns the three verified testimonials."""

    result = _service().get_testimonials("camp-1")

    assert result.error is None
    assert [t.author for t in result.testimonials] == ["Sarah M.", "John D.", "Emily R."]
    assert all(1 <= t.rating <= 5 and t.verified for t in result.testimonials)


def test_testimonial_read_is_idempotent() -> None:
    """Verify repeated reads return equal results."""

    service = _service()
    assert service.get_testimonials("camp-1") == service.get_testimonials("camp-1")


def test_substituted_testimonial_source_keeps_shape() -> None:
    """Verify a per-campaign source can replace the static feed."""

    class CampaignTestimonials:
        def list_testimonials(self, campaign_id):
            return [Testimonial(id=f"{campaign_id}-1", author="Ana", content="Great", rating=4, verified=False)]

    result = _service(testimonials=CampaignTestimonials()).get_testimonials("camp-9")

    assert [t.id for t in result.testimonials] == ["camp-9-1"]


def test_testimonial_source_failure() -> None:
    """Verify a source fault yields an empty list and the error string."""

    class Broken:
        def list_testimonials(self, campaign_id):
            raise RuntimeError("boom")

    result = _service(testimonials=Broken()).get_testimonials("camp-1")

    assert result.testimonials == []
    assert result.error == "Failed to fetch testimonials"


@pytest.mark.parametrize("count", [0, 1])
def test_generate_is_idempotent_without_writes(count, owner) -> None:
    """Verify aggregation has no side effects."""

    events = [make_event(f"e{i}", "purchase", NOW - timedelta(minutes=i + 1)) for i in range(count)]
    service = _service(events=FakeProofEventStore(events), identity=FakeIdentityResolver(owner))
    assert service.generate_social_proof("camp-1") == service.generate_social_proof("camp-1")
