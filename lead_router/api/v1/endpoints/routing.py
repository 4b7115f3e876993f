from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Request

from lead_router.api.deps import (
    get_company_id,
    get_routing_rule_repo,
    get_routing_service,
)
from lead_router.core.config import settings
from lead_router.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from lead_router.core.exceptions import RoutingRuleNotFoundError
from lead_router.core.rate_limit import limiter
from lead_router.repositories.routing_rule_repository import RoutingRuleRepository
from lead_router.schemas.common import Pagination
from lead_router.schemas.routing import (
    RouteLeadResponse,
    RoutedLead,
    RoutingRuleListResponse,
    RoutingRuleOut,
    RoutingRuleResponse,
)
from lead_router.services.routing_service import LeadRoutingService

router = APIRouter(prefix="/routing", tags=["Routing"])


@router.post("/leads/{lead_id}/route", response_model=RouteLeadResponse)
@limiter.limit(settings.ROUTE_RATE_LIMIT)
async def route_lead(
    request: Request,
    lead_id: int = Path(..., gt=0),
    company_id: int = Depends(get_company_id),
    service: LeadRoutingService = Depends(get_routing_service),
) -> RouteLeadResponse:
    """Route a lead through the company's routing rules.

    Returns the lead whether or not an assignee was found; check
    ``data.assigned_to``.  Business logic is delegated to
    :class:`LeadRoutingService`.
    """
    lead = await service.route_lead(lead_id, company_id)
    return RouteLeadResponse(
        message="Lead routed successfully",
        data=RoutedLead.model_validate(lead),
    )


@router.get("/rules", response_model=RoutingRuleListResponse)
async def list_routing_rules(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    is_active: Optional[bool] = Query(None),
    search: Optional[str] = Query(None, max_length=150),
    company_id: int = Depends(get_company_id),
    rule_repo: RoutingRuleRepository = Depends(get_routing_rule_repo),
) -> RoutingRuleListResponse:
    """List the company's routing rules in evaluation order (read-only)."""
    rules, total = await rule_repo.list_rules(
        company_id,
        offset=(page - 1) * limit,
        limit=limit,
        is_active=is_active,
        search=search,
    )
    return RoutingRuleListResponse(
        items=[RoutingRuleOut.model_validate(r) for r in rules],
        pagination=Pagination(page=page, limit=limit, total=total),
    )


@router.get("/rules/{rule_id}", response_model=RoutingRuleResponse)
async def get_routing_rule(
    rule_id: int = Path(..., gt=0),
    company_id: int = Depends(get_company_id),
    rule_repo: RoutingRuleRepository = Depends(get_routing_rule_repo),
) -> RoutingRuleResponse:
    """Return one of the company's routing rules (read-only)."""
    rule = await rule_repo.get_by_id(rule_id, company_id)
    if rule is None:
        raise RoutingRuleNotFoundError(f"Routing Rule {rule_id} not found")
    return RoutingRuleResponse(data=RoutingRuleOut.model_validate(rule))
