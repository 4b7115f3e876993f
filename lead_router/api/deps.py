"""API-layer dependency functions.

Re-exports all dependency factories from ``lead_router.dependencies`` so
that endpoint modules only need to import from ``lead_router.api.deps``.
"""

from lead_router.dependencies import (
    # Tenant
    get_company_id,
    # Repository factories
    get_lead_repo,
    get_user_repo,
    get_followup_repo,
    get_routing_rule_repo,
    # Service factories
    get_workload_calculator,
    get_assignment_resolver,
    get_routing_service,
    # Redis
    get_redis_client,
    get_cache_service,
)

__all__ = [
    "get_company_id",
    "get_lead_repo",
    "get_user_repo",
    "get_followup_repo",
    "get_routing_rule_repo",
    "get_workload_calculator",
    "get_assignment_resolver",
    "get_routing_service",
    "get_redis_client",
    "get_cache_service",
]
