from typing import List, Optional, Tuple

from sqlalchemy import func, select

from lead_router.models.routing_rule import LeadRoutingRule
from lead_router.repositories.base import BaseRepository


class RoutingRuleRepository(BaseRepository):
    """Encapsulates queries against the ``lead_routing_rules`` table."""

    async def get_by_id(self, rule_id: int, company_id: int) -> Optional[LeadRoutingRule]:
        """Return one rule of *company_id*, active or not."""
        result = await self._db.execute(
            select(LeadRoutingRule).where(
                LeadRoutingRule.id == rule_id,
                LeadRoutingRule.company_id == company_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_active(self, company_id: int) -> List[LeadRoutingRule]:
        """Return the company's active rules in evaluation order.

        Highest ``priority`` first; equal priorities keep insertion
        order (ascending ``id``).
        """
        result = await self._db.execute(
            select(LeadRoutingRule)
            .where(
                LeadRoutingRule.company_id == company_id,
                LeadRoutingRule.is_active.is_(True),
            )
            .order_by(LeadRoutingRule.priority.desc(), LeadRoutingRule.id.asc())
        )
        return list(result.scalars().all())

    async def list_rules(
        self,
        company_id: int,
        *,
        offset: int = 0,
        limit: int = 20,
        is_active: Optional[bool] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[LeadRoutingRule], int]:
        """Return one page of the company's rules and the total match count."""
        filters = [LeadRoutingRule.company_id == company_id]
        if is_active is not None:
            filters.append(LeadRoutingRule.is_active.is_(is_active))
        if search:
            filters.append(LeadRoutingRule.rule_name.ilike(f"%{search}%"))

        total = (
            await self._db.execute(
                select(func.count(LeadRoutingRule.id)).where(*filters)
            )
        ).scalar() or 0

        result = await self._db.execute(
            select(LeadRoutingRule)
            .where(*filters)
            .order_by(LeadRoutingRule.priority.desc(), LeadRoutingRule.id.asc())
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total
