"""
Social Proof API Endpoints.

Endpoints for display widgets, event ingestion and testimonials.
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_social_proof_service
from api.models import (
    ProofWidgetResponse,
    SocialProofResponse,
    TestimonialResponse,
    TestimonialsResponse,
    TrackEventRequest as APITrackEventRequest,
    TrackEventResponse,
)
from services.social_proof_service import SocialProofService, TrackEventRequest

router = APIRouter()


@router.get(
    "/campaigns/{campaign_id}/social-proof",
    response_model=SocialProofResponse,
    summary="Generate Social Proof",
    description="Recent activity and live visitor widgets for a campaign, highest priority first."
)
def generate_social_proof(
    campaign_id: str,
    service: SocialProofService = Depends(get_social_proof_service),
):
    """
    Build display widgets for a campaign.

    **Widgets:**
    - Up to 3 recent activity widgets from the newest proof events (priority 10, 9, 8)
    - A live visitor widget (priority 8) when the authenticated owner's links
      were clicked in the last 5 minutes

    A non-null `error` means the list is partial or empty.
    """
    result = service.generate_social_proof(campaign_id)

    return SocialProofResponse(
        widgets=[
            ProofWidgetResponse(
                id=widget.id,
                type=widget.type.value,
                content=widget.content,
                priority=widget.priority,
                display_duration_ms=widget.display_duration_ms,
            )
            for widget in result.widgets
        ],
        error=result.error,
    )


@router.post(
    "/social-proof/events",
    response_model=TrackEventResponse,
    summary="Track Proof Event",
    description="Record a purchase, signup, view or cart-add event for a campaign."
)
def track_event(
    request: APITrackEventRequest,
    service: SocialProofService = Depends(get_social_proof_service),
):
    """
    Append one proof event.

    **Example request:**
    ```json
    {
      "campaign_id": "c0ffee00-0000-0000-0000-000000000001",
      "event_type": "purchase",
      "product_name": "Wireless Earbuds",
      "country": "Canada"
    }
    ```
    """
    result = service.track_event(TrackEventRequest(
        campaign_id=request.campaign_id,
        event_type=request.event_type.value,
        product_name=request.product_name,
        country=request.country,
        amount=request.amount,
    ))

    return TrackEventResponse(success=result.success, error=result.error)


@router.get(
    "/campaigns/{campaign_id}/testimonials",
    response_model=TestimonialsResponse,
    summary="Get Testimonials",
)
def get_testimonials(
    campaign_id: str,
    service: SocialProofService = Depends(get_social_proof_service),
):
    result = service.get_testimonials(campaign_id)

    return TestimonialsResponse(
        testimonials=[
            TestimonialResponse(
                id=t.id,
                author=t.author,
                content=t.content,
                rating=t.rating,
                verified=t.verified,
            )
            for t in result.testimonials
        ],
        error=result.error,
    )
