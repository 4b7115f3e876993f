from typing import List, Optional

from sqlalchemy import select

from lead_router.models.user import User
from lead_router.repositories.base import BaseRepository


class UserRepository(BaseRepository):
    """Encapsulates every SQL query that touches the ``users`` table."""

    async def get_in_company(self, user_id: int, company_id: int) -> Optional[User]:
        """Return a user by primary key if it belongs to *company_id*."""
        result = await self._db.execute(
            select(User).where(User.id == user_id, User.company_id == company_id)
        )
        return result.scalar_one_or_none()

    async def list_active(
        self, company_id: int, role_id: Optional[int] = None
    ) -> List[User]:
        """Return the company's active users in ascending id order.

        When *role_id* is given only users holding that role are returned.
        The ordering is what makes least-loaded selection tie-break on
        the lowest id.
        """
        query = select(User).where(
            User.company_id == company_id,
            User.is_active.is_(True),
        )
        if role_id is not None:
            query = query.where(User.role_id == role_id)
        result = await self._db.execute(query.order_by(User.id.asc()))
        return list(result.scalars().all())
