"""Pydantic schemas package; re-exports for convenience."""

from lead_router.schemas.common import (
    AssignmentType as AssignmentType,
    Pagination as Pagination,
    SuccessResponse as SuccessResponse,
)
from lead_router.schemas.routing import (
    AssignedUserOut as AssignedUserOut,
    LeadSnapshot as LeadSnapshot,
    PreferredAreaSnapshot as PreferredAreaSnapshot,
    RouteLeadResponse as RouteLeadResponse,
    RoutedLead as RoutedLead,
    RoutingConditions as RoutingConditions,
    RoutingRuleListResponse as RoutingRuleListResponse,
    RoutingRuleResponse as RoutingRuleResponse,
    RoutingRuleOut as RoutingRuleOut,
)
