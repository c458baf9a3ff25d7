"""
Pricing API Endpoints.

Endpoints for price recommendations, optimal price curves, competitor
benchmarking and surge schedules. All require an authenticated campaign
owner; without one the response carries `"error": "Not authenticated"`.
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_pricing_service
from api.models import (
    CompetitorComparisonResponse,
    CompetitorMonitorRequest,
    CompetitorMonitorResponse,
    DemandCurvePointResponse,
    OptimalPriceResponse,
    PricingOptimizationResponse,
    PricingRecommendationResponse,
    SurgePricingResponse,
    SurgeSlotResponse,
)
from services.pricing_optimization_service import PricingOptimizationService

router = APIRouter()


@router.get(
    "/campaigns/{campaign_id}/pricing/recommendations",
    response_model=PricingOptimizationResponse,
    summary="Optimize Campaign Pricing",
    description="Recommend a price for every product in the campaign from its demand model."
)
def optimize_pricing(
    campaign_id: str,
    service: PricingOptimizationService = Depends(get_pricing_service),
):
    """
    Recommend prices for a campaign's products.

    **total_revenue_increase** is the sum of each product's expected revenue
    weighted by its relative price change, so price cuts contribute negatively.

    All recommendations are returned regardless of confidence; filtering by
    confidence is left to the caller.
    """
    result = service.optimize_pricing(campaign_id)

    return PricingOptimizationResponse(
        recommendations=[
            PricingRecommendationResponse(
                product_id=rec.product_id,
                current_price=rec.current_price,
                recommended_price=rec.recommended_price,
                expected_revenue=rec.expected_revenue,
                price_elasticity=rec.price_elasticity,
                confidence=rec.confidence,
            )
            for rec in result.recommendations
        ],
        total_revenue_increase=result.total_revenue_increase,
        error=result.error,
    )


@router.get(
    "/campaigns/{campaign_id}/pricing/products/{product_id}/optimal-price",
    response_model=OptimalPriceResponse,
    summary="Calculate Optimal Price",
    description="Revenue-maximising price for one product over a 0.7x-1.3x demand curve."
)
def calculate_optimal_price(
    campaign_id: str,
    product_id: str,
    service: PricingOptimizationService = Depends(get_pricing_service),
):
    result = service.calculate_optimal_price(campaign_id, product_id)

    return OptimalPriceResponse(
        optimal_price=result.optimal_price,
        demand_curve=[
            DemandCurvePointResponse(price=point.price, expected_units=point.expected_units)
            for point in result.demand_curve
        ],
        error=result.error,
    )


@router.post(
    "/pricing/competitors",
    response_model=CompetitorMonitorResponse,
    summary="Monitor Competitor Prices",
    description="Compare your price for each product URL against current competitor prices."
)
def monitor_competitors(
    request: CompetitorMonitorRequest,
    service: PricingOptimizationService = Depends(get_pricing_service),
):
    """
    One comparison per URL, in request order.

    **Example request:**
    ```json
    {
      "product_urls": ["https://shop.example.com/products/wireless-earbuds"]
    }
    ```
    """
    result = service.monitor_competitors(request.product_urls)

    return CompetitorMonitorResponse(
        comparisons=[
            CompetitorComparisonResponse(
                product_url=comparison.product_url,
                your_price=comparison.your_price,
                competitor_prices=comparison.competitor_prices,
                avg_market_price=comparison.avg_market_price,
                price_position=comparison.price_position.value,
            )
            for comparison in result.comparisons
        ],
        error=result.error,
    )


@router.get(
    "/campaigns/{campaign_id}/pricing/surge",
    response_model=SurgePricingResponse,
    summary="Optimize Surge Pricing",
    description="Per time slot price multipliers from the campaign's hourly demand pattern."
)
def optimize_surge_pricing(
    campaign_id: str,
    service: PricingOptimizationService = Depends(get_pricing_service),
):
    result = service.optimize_surge_pricing(campaign_id)

    return SurgePricingResponse(
        surge_schedule=[
            SurgeSlotResponse(
                time_slot=slot.time_slot,
                demand_level=slot.demand_level.value,
                price_multiplier=slot.price_multiplier,
                expected_revenue=slot.expected_revenue,
            )
            for slot in result.surge_schedule
        ],
        error=result.error,
    )
