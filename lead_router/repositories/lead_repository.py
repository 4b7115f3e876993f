from typing import Dict, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from lead_router.models.lead import Lead, LeadPreferredArea
from lead_router.models.location import Area
from lead_router.models.user import User
from lead_router.repositories.base import BaseRepository


class LeadRepository(BaseRepository):
    """Encapsulates every SQL query that touches the ``leads`` table."""

    async def get_by_id(self, lead_id: int, company_id: int) -> Optional[Lead]:
        """Return a lead of *company_id* with everything routing reads.

        Eagerly loads ``preferred_areas → area → state`` for the matcher
        and ``assigned_user`` for the response, so nothing lazy-loads
        outside the async context.
        """
        result = await self._db.execute(
            select(Lead)
            .where(Lead.id == lead_id, Lead.company_id == company_id)
            .options(
                selectinload(Lead.preferred_areas)
                .selectinload(LeadPreferredArea.area)
                .selectinload(Area.state),
                selectinload(Lead.assigned_user),
            )
        )
        return result.scalar_one_or_none()

    async def count_assigned_to(self, company_id: int, user_id: int) -> int:
        """Count every lead of the company assigned to *user_id*, any status."""
        result = await self._db.execute(
            select(func.count(Lead.id)).where(
                Lead.company_id == company_id,
                Lead.assigned_to == user_id,
            )
        )
        return result.scalar() or 0

    async def count_unassigned_state_for(self, company_id: int, user_id: int) -> int:
        """Count leads assigned to *user_id* that have no status yet."""
        result = await self._db.execute(
            select(func.count(Lead.id)).where(
                Lead.company_id == company_id,
                Lead.assigned_to == user_id,
                Lead.status_id.is_(None),
            )
        )
        return result.scalar() or 0

    async def count_assigned_by_user(
        self, company_id: int, user_ids: Sequence[int]
    ) -> Dict[int, int]:
        """Grouped variant of :meth:`count_assigned_to` for a candidate pool.

        Users without any lead are absent from the returned mapping.
        """
        if not user_ids:
            return {}
        rows = await self._db.execute(
            select(Lead.assigned_to, func.count(Lead.id))
            .where(
                Lead.company_id == company_id,
                Lead.assigned_to.in_(list(user_ids)),
            )
            .group_by(Lead.assigned_to)
        )
        return {user_id: count for user_id, count in rows.all()}

    async def count_unassigned_state_by_user(
        self, company_id: int, user_ids: Sequence[int]
    ) -> Dict[int, int]:
        """Grouped variant of :meth:`count_unassigned_state_for`."""
        if not user_ids:
            return {}
        rows = await self._db.execute(
            select(Lead.assigned_to, func.count(Lead.id))
            .where(
                Lead.company_id == company_id,
                Lead.assigned_to.in_(list(user_ids)),
                Lead.status_id.is_(None),
            )
            .group_by(Lead.assigned_to)
        )
        return {user_id: count for user_id, count in rows.all()}

    async def set_assignee(self, lead: Lead, user: User) -> Lead:
        """Point the lead at *user* and flush; the caller commits."""
        lead.assigned_to = user.id
        lead.assigned_user = user
        await self.flush()
        return lead
