from datetime import datetime, timezone

from sqlalchemy import event

from lead_router.models.followup import LeadFollowup
from lead_router.models.lead import Lead
from lead_router.models.routing_rule import LeadRoutingRule
from lead_router.models.user import User


# Auto updated_at
@event.listens_for(Lead, "before_update")
@event.listens_for(User, "before_update")
@event.listens_for(LeadFollowup, "before_update")
@event.listens_for(LeadRoutingRule, "before_update")
def update_timestamp(mapper, connection, target):
    target.updated_at = datetime.now(timezone.utc)
