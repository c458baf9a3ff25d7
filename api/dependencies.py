"""
Per-request service wiring.

Services are stateless and built for each request from the caller's bearer
token and the shared Supabase client. Tests replace these providers through
`app.dependency_overrides`.
"""

from typing import Optional

from fastapi import Depends, Header

from repositories.click_repository import ClickRepository
from repositories.client import get_supabase_client
from repositories.identity_repository import SupabaseIdentityResolver
from repositories.market_repository import MarketRepository
from repositories.performance_repository import PerformanceRepository
from repositories.product_repository import ProductRepository
from repositories.proof_event_repository import ProofEventRepository
from services.competitor_monitor import CompetitorMonitor
from services.pricing_engine import PricingRecommendationEngine
from services.pricing_optimization_service import PricingOptimizationService
from services.social_proof_service import SocialProofService
from services.surge_scheduler import SurgeScheduler


def get_access_token(authorization: Optional[str] = Header(default=None)) -> Optional[str]:
    """Bearer token from the Authorization header, or None."""
    if not authorization:
        return None

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_identity_resolver(
    access_token: Optional[str] = Depends(get_access_token),
) -> SupabaseIdentityResolver:
    return SupabaseIdentityResolver(access_token)


def get_pricing_service(
    identity: SupabaseIdentityResolver = Depends(get_identity_resolver),
) -> PricingOptimizationService:
    client = get_supabase_client()
    return PricingOptimizationService(
        identity=identity,
        engine=PricingRecommendationEngine(ProductRepository(client)),
        competitor_monitor=CompetitorMonitor(MarketRepository(client)),
        surge_scheduler=SurgeScheduler(PerformanceRepository(client)),
    )


def get_social_proof_service(
    identity: SupabaseIdentityResolver = Depends(get_identity_resolver),
) -> SocialProofService:
    client = get_supabase_client()
    # Testimonials stay on the static feed until per-campaign ones are collected.
    return SocialProofService(
        identity=identity,
        events=ProofEventRepository(client),
        clicks=ClickRepository(client),
    )
