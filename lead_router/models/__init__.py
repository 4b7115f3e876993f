from lead_router.models.base import Base
from lead_router.models.user import Role, User
from lead_router.models.location import State, Area
from lead_router.models.lead import Lead, LeadPreferredArea
from lead_router.models.followup import LeadFollowup
from lead_router.models.routing_rule import LeadRoutingRule

# Import event listeners to register them
from lead_router.models import listeners  # noqa: F401

__all__ = [
    "Base",
    "Role",
    "User",
    "State",
    "Area",
    "Lead",
    "LeadPreferredArea",
    "LeadFollowup",
    "LeadRoutingRule",
]
