import logging
from typing import AsyncIterator, Optional

from fastapi import Depends, Header
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from lead_router.core.config import settings
from lead_router.core.database import get_db
from lead_router.services.assignment_resolver import AssignmentResolver
from lead_router.services.routing_service import LeadRoutingService
from lead_router.services.workload import WorkloadCalculator

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Tenant
# ---------------------------------------------------------------------------


async def get_company_id(
    company_id: int = Header(..., alias="X-Company-Id", gt=0),
) -> int:
    """Company (tenant) id set by the authenticating gateway."""
    return company_id


# ---------------------------------------------------------------------------
# Redis client factory
# ---------------------------------------------------------------------------


async def get_redis_client() -> AsyncIterator[Optional[Redis]]:
    """Yield an async Redis client when the routing lock needs one.

    The client lives for one request and is closed afterwards, also when
    the initial ping fails.
    """
    if not settings.ROUTING_TENANT_LOCK_ENABLED:
        yield None
        return

    client = Redis.from_url(settings.REDIS_URL, decode_responses=True)
    try:
        await client.ping()
    except Exception:
        logger.warning("Redis unavailable, routing lock disabled for this request")
        await client.aclose()
        yield None
        return

    try:
        yield client
    finally:
        await client.aclose()


async def get_cache_service(
    redis_client: Optional[Redis] = Depends(get_redis_client),
):
    """Build a :class:`CacheService` backed by the shared Redis client."""
    from lead_router.core.cache import CacheService

    return CacheService(redis_client=redis_client)


# ---------------------------------------------------------------------------
# Repository factory functions (one per repository, each gets the shared db)
# ---------------------------------------------------------------------------


async def get_lead_repo(
    db: AsyncSession = Depends(get_db),
):
    from lead_router.repositories.lead_repository import LeadRepository

    return LeadRepository(db)


async def get_user_repo(
    db: AsyncSession = Depends(get_db),
):
    from lead_router.repositories.user_repository import UserRepository

    return UserRepository(db)


async def get_followup_repo(
    db: AsyncSession = Depends(get_db),
):
    from lead_router.repositories.followup_repository import FollowupRepository

    return FollowupRepository(db)


async def get_routing_rule_repo(
    db: AsyncSession = Depends(get_db),
):
    from lead_router.repositories.routing_rule_repository import (
        RoutingRuleRepository,
    )

    return RoutingRuleRepository(db)


# ---------------------------------------------------------------------------
# Service factory functions
# ---------------------------------------------------------------------------


async def get_workload_calculator(
    lead_repo=Depends(get_lead_repo),
    followup_repo=Depends(get_followup_repo),
) -> WorkloadCalculator:
    return WorkloadCalculator(lead_repo=lead_repo, followup_repo=followup_repo)


async def get_assignment_resolver(
    user_repo=Depends(get_user_repo),
    workload: WorkloadCalculator = Depends(get_workload_calculator),
) -> AssignmentResolver:
    return AssignmentResolver(user_repo=user_repo, workload=workload)


async def get_routing_service(
    lead_repo=Depends(get_lead_repo),
    rule_repo=Depends(get_routing_rule_repo),
    user_repo=Depends(get_user_repo),
    resolver: AssignmentResolver = Depends(get_assignment_resolver),
    cache=Depends(get_cache_service),
) -> LeadRoutingService:
    """Build a :class:`LeadRoutingService` with injected dependencies."""
    return LeadRoutingService(
        lead_repo=lead_repo,
        rule_repo=rule_repo,
        user_repo=user_repo,
        resolver=resolver,
        cache=cache,
    )
