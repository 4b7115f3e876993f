import logging
from datetime import datetime, timezone
from typing import Callable, Dict, Optional, Sequence, Union

from lead_router.core.constants import WORKLOAD_STRATEGIES
from lead_router.repositories.followup_repository import FollowupRepository
from lead_router.repositories.lead_repository import LeadRepository
from lead_router.schemas.common import AssignmentType

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WorkloadCalculator:
    """Live per-user load metrics for the least-loaded strategies.

    Metrics (always read fresh, never cached):
        - ``round_robin``   every lead of the company assigned to the user,
                            whatever its status
        - ``load_balance``  the user's leads with no status yet, plus
                            follow-ups on the user's leads that are due
                            now or overdue

    :meth:`load` answers for one user; :meth:`loads` answers for a whole
    candidate pool with one grouped query per count, which is what the
    resolver uses.
    """

    def __init__(
        self,
        lead_repo: LeadRepository,
        followup_repo: FollowupRepository,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._lead_repo = lead_repo
        self._followup_repo = followup_repo
        self._clock = clock or _utcnow

    async def load(
        self,
        user_id: int,
        company_id: int,
        assignment_type: Union[AssignmentType, str],
    ) -> int:
        """Return the workload of a single user under *assignment_type*."""
        kind = self._workload_kind(assignment_type)

        if kind is AssignmentType.round_robin:
            return await self._lead_repo.count_assigned_to(company_id, user_id)

        as_of = self._clock()
        unassigned = await self._lead_repo.count_unassigned_state_for(
            company_id, user_id
        )
        due = await self._followup_repo.count_due_or_overdue_for(
            company_id, user_id, as_of
        )
        return unassigned + due

    async def loads(
        self,
        user_ids: Sequence[int],
        company_id: int,
        assignment_type: Union[AssignmentType, str],
    ) -> Dict[int, int]:
        """Return ``{user_id: load}`` for every id in *user_ids*.

        Users with nothing to count get ``0``.
        """
        kind = self._workload_kind(assignment_type)
        if not user_ids:
            return {}

        if kind is AssignmentType.round_robin:
            counts = await self._lead_repo.count_assigned_by_user(company_id, user_ids)
            return {uid: counts.get(uid, 0) for uid in user_ids}

        as_of = self._clock()
        unassigned = await self._lead_repo.count_unassigned_state_by_user(
            company_id, user_ids
        )
        due = await self._followup_repo.count_due_or_overdue_by_user(
            company_id, user_ids, as_of
        )
        return {uid: unassigned.get(uid, 0) + due.get(uid, 0) for uid in user_ids}

    @staticmethod
    def _workload_kind(assignment_type: Union[AssignmentType, str]) -> AssignmentType:
        kind = AssignmentType(assignment_type)
        if kind not in WORKLOAD_STRATEGIES:
            raise ValueError(f"No workload metric for assignment type '{kind.value}'")
        return kind
