"""Repository layer: all database access goes through here.

Repositories encapsulate SQLAlchemy queries so that the service layer
only contains routing logic.
"""

from lead_router.repositories.lead_repository import LeadRepository
from lead_router.repositories.user_repository import UserRepository
from lead_router.repositories.followup_repository import FollowupRepository
from lead_router.repositories.routing_rule_repository import RoutingRuleRepository

__all__ = [
    "LeadRepository",
    "UserRepository",
    "FollowupRepository",
    "RoutingRuleRepository",
]
