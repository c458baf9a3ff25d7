"""
API Request and Response Models.

Pydantic models for validating API requests and serializing responses.
Every response carries an `error` field: service failures are reported in
the payload, not as HTTP errors.
"""

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from domain.social_proof import ProofEventType


# ============================================================================
# Pricing Models
# ============================================================================

class PricingRecommendationResponse(BaseModel):
    """Recommended price for one product."""
    product_id: str
    current_price: Decimal
    recommended_price: Decimal
    expected_revenue: Decimal
    price_elasticity: float
    confidence: float


class PricingOptimizationResponse(BaseModel):
    """Response for campaign pricing optimization."""
    recommendations: List[PricingRecommendationResponse]
    total_revenue_increase: Decimal
    error: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "recommendations": [
                    {
                        "product_id": "prod-1",
                        "current_price": "49.99",
                        "recommended_price": "54.99",
                        "expected_revenue": "8200.00",
                        "price_elasticity": -0.8,
                        "confidence": 87.5
                    }
                ],
                "total_revenue_increase": "820.16",
                "error": None
            }
        }


class DemandCurvePointResponse(BaseModel):
    price: Decimal
    expected_units: float


class OptimalPriceResponse(BaseModel):
    """Response with the revenue-maximising price and its demand curve."""
    optimal_price: Decimal
    demand_curve: List[DemandCurvePointResponse]
    error: Optional[str] = None


class CompetitorMonitorRequest(BaseModel):
    """Request to compare product URLs against competitor prices."""
    product_urls: List[str] = Field(
        ...,
        description="Product reference URLs, compared in the given order"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "product_urls": [
                    "https://shop.example.com/products/wireless-earbuds"
                ]
            }
        }


class CompetitorComparisonResponse(BaseModel):
    product_url: str
    your_price: Decimal
    competitor_prices: List[Decimal]
    avg_market_price: Decimal
    price_position: str  # "below", "at" or "above"


class CompetitorMonitorResponse(BaseModel):
    comparisons: List[CompetitorComparisonResponse]
    error: Optional[str] = None


class SurgeSlotResponse(BaseModel):
    time_slot: str
    demand_level: str  # "low", "medium" or "high"
    price_multiplier: float
    expected_revenue: Decimal


class SurgePricingResponse(BaseModel):
    surge_schedule: List[SurgeSlotResponse]
    error: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "surge_schedule": [
                    {
                        "time_slot": "Evening (17:00-22:00)",
                        "demand_level": "high",
                        "price_multiplier": 1.15,
                        "expected_revenue": "1533.72"
                    }
                ],
                "error": None
            }
        }


# ============================================================================
# Social Proof Models
# ============================================================================

class ProofWidgetResponse(BaseModel):
    id: str
    type: str
    content: str
    priority: int
    display_duration_ms: int


class SocialProofResponse(BaseModel):
    """Widgets ordered by priority, highest first."""
    widgets: List[ProofWidgetResponse]
    error: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "widgets": [
                    {
                        "id": "recent_purchase_0",
                        "type": "recent_purchase",
                        "content": "Someone from Canada just purchased Wireless Earbuds 4 minutes ago",
                        "priority": 10,
                        "display_duration_ms": 5000
                    },
                    {
                        "id": "live_visitors",
                        "type": "live_visitors",
                        "content": "12 people are viewing this right now",
                        "priority": 8,
                        "display_duration_ms": 8000
                    }
                ],
                "error": None
            }
        }


class TrackEventRequest(BaseModel):
    """Request to record a social proof event."""
    campaign_id: str = Field(..., min_length=1)
    event_type: ProofEventType
    product_name: Optional[str] = None
    country: Optional[str] = None
    amount: Optional[Decimal] = Field(None, ge=0)

    class Config:
        json_schema_extra = {
            "example": {
                "campaign_id": "c0ffee00-0000-0000-0000-000000000001",
                "event_type": "purchase",
                "product_name": "Wireless Earbuds",
                "country": "Canada",
                "amount": "59.99"
            }
        }


class TrackEventResponse(BaseModel):
    success: bool
    error: Optional[str] = None


class TestimonialResponse(BaseModel):
    id: str
    author: str
    content: str
    rating: int = Field(..., ge=1, le=5)
    verified: bool


class TestimonialsResponse(BaseModel):
    testimonials: List[TestimonialResponse]
    error: Optional[str] = None
