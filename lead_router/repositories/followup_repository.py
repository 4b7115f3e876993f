from datetime import datetime
from typing import Dict, Sequence

from sqlalchemy import and_, func, select

from lead_router.models.followup import LeadFollowup
from lead_router.models.lead import Lead
from lead_router.repositories.base import BaseRepository


class FollowupRepository(BaseRepository):
    """Encapsulates queries against the ``lead_followups`` table."""

    async def count_due_or_overdue_for(
        self, company_id: int, user_id: int, as_of: datetime
    ) -> int:
        """Count follow-ups on *user_id*'s leads due at or before *as_of*."""
        query = (
            select(func.count(LeadFollowup.id))
            .join(Lead, LeadFollowup.lead_id == Lead.id)
            .where(
                and_(
                    LeadFollowup.company_id == company_id,
                    Lead.assigned_to == user_id,
                    LeadFollowup.next_followup_date <= as_of,
                )
            )
        )
        return (await self._db.execute(query)).scalar() or 0

    async def count_due_or_overdue_by_user(
        self, company_id: int, user_ids: Sequence[int], as_of: datetime
    ) -> Dict[int, int]:
        """Grouped variant of :meth:`count_due_or_overdue_for`."""
        if not user_ids:
            return {}
        query = (
            select(Lead.assigned_to, func.count(LeadFollowup.id))
            .select_from(LeadFollowup)
            .join(Lead, LeadFollowup.lead_id == Lead.id)
            .where(
                and_(
                    LeadFollowup.company_id == company_id,
                    Lead.assigned_to.in_(list(user_ids)),
                    LeadFollowup.next_followup_date <= as_of,
                )
            )
            .group_by(Lead.assigned_to)
        )
        rows = await self._db.execute(query)
        return {user_id: count for user_id, count in rows.all()}
