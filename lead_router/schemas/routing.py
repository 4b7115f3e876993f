"""Routing schemas: stored rule conditions, lead snapshots and responses."""

from datetime import datetime
from decimal import Decimal
from typing import Any, FrozenSet, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, StrictInt, field_validator

from lead_router.schemas.common import Pagination, SuccessResponse


# ---------------------------------------------------------------------------
# Rule conditions
# ---------------------------------------------------------------------------


class RoutingConditions(BaseModel):
    """Optional-field predicate stored on a routing rule.

    Every field is optional; ``None`` means "any value".  Unknown keys in
    the stored JSON are ignored so older rules keep working when fields
    are added.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    # Ids are compared to integer columns; "3" or true must not pass as 3
    activity_source_id: Optional[StrictInt] = None
    property_type: Optional[str] = None
    interest_type: Optional[str] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    area_ids: Optional[FrozenSet[StrictInt]] = None
    city: Optional[str] = None
    state_id: Optional[StrictInt] = None

    @field_validator("property_type", "interest_type", "city", mode="before")
    @classmethod
    def blank_as_unset(cls, value: Any) -> Any:
        """Rule forms submit "" for untouched text inputs; treat it as unset."""
        if isinstance(value, str) and not value.strip():
            return None
        return value


# ---------------------------------------------------------------------------
# Lead snapshot consumed by the matcher
# ---------------------------------------------------------------------------


class PreferredAreaSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    area_id: int
    state_id: Optional[int] = None
    city: Optional[str] = None


class LeadSnapshot(BaseModel):
    """Immutable view of the lead attributes routing rules can test."""

    model_config = ConfigDict(frozen=True)

    lead_id: int
    company_id: int
    activity_source_id: Optional[int] = None
    property_type: Optional[str] = None
    interest_type: Optional[str] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    preferred_areas: Tuple[PreferredAreaSnapshot, ...] = ()

    @property
    def area_ids(self) -> FrozenSet[int]:
        return frozenset(a.area_id for a in self.preferred_areas)

    @property
    def cities(self) -> FrozenSet[str]:
        return frozenset(a.city for a in self.preferred_areas if a.city)

    @property
    def state_ids(self) -> FrozenSet[int]:
        return frozenset(
            a.state_id for a in self.preferred_areas if a.state_id is not None
        )

    @classmethod
    def from_lead(cls, lead: Any) -> "LeadSnapshot":
        """Build a snapshot from a ``Lead`` row with its areas loaded.

        Expects ``preferred_areas → area → state`` to be eagerly loaded
        (see ``LeadRepository.get_by_id``).
        """
        areas = []
        for preferred in lead.preferred_areas or []:
            area = preferred.area
            state = area.state if area is not None else None
            areas.append(
                PreferredAreaSnapshot(
                    area_id=preferred.area_id,
                    state_id=area.state_id if area is not None else None,
                    city=state.name if state is not None else None,
                )
            )
        return cls(
            lead_id=lead.id,
            company_id=lead.company_id,
            activity_source_id=lead.activity_source_id,
            property_type=lead.property_type,
            interest_type=lead.interest_type,
            min_price=lead.min_price,
            max_price=lead.max_price,
            preferred_areas=tuple(areas),
        )


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class AssignedUserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: Optional[str] = None


class RoutedLead(BaseModel):
    """Lead as returned after a routing attempt (assigned or unchanged)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    company_id: int
    name: Optional[str] = None
    activity_source_id: Optional[int] = None
    property_type: Optional[str] = None
    interest_type: Optional[str] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    status_id: Optional[int] = None
    assigned_to: Optional[int] = None
    assigned_user: Optional[AssignedUserOut] = None


class RouteLeadResponse(SuccessResponse):
    """Response body for POST /api/v1/routing/leads/{lead_id}/route."""

    data: RoutedLead


class RoutingRuleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    rule_name: str
    priority: int
    is_active: bool
    conditions: str
    assignment_type: str
    assigned_user_id: Optional[int] = None
    assigned_role_id: Optional[int] = None
    created_at: Optional[datetime] = None


class RoutingRuleListResponse(SuccessResponse):
    """Paginated response body for GET /api/v1/routing/rules."""

    items: List[RoutingRuleOut]
    pagination: Pagination


class RoutingRuleResponse(SuccessResponse):
    """Response body for GET /api/v1/routing/rules/{rule_id}."""

    data: RoutingRuleOut
