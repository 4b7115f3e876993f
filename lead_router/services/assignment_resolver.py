"""Turns a matched routing rule into a concrete user id.

One strategy class per ``AssignmentType``; :class:`AssignmentResolver`
dispatches on the rule's tag.  Strategies only read: persisting the
assignment is the routing service's job.
"""

import logging
from typing import Any, Dict, Optional

from lead_router.repositories.user_repository import UserRepository
from lead_router.schemas.common import AssignmentType
from lead_router.services.workload import WorkloadCalculator

logger = logging.getLogger(__name__)


class AssignmentStrategy:
    """Common contract: ``resolve(rule, company_id) -> Optional[user_id]``."""

    async def resolve(self, rule: Any, company_id: int) -> Optional[int]:
        raise NotImplementedError


class SpecificUserStrategy(AssignmentStrategy):
    """Hand back the rule's configured user as-is.

    No membership or active check here; the persistence step rejects a
    user outside the company.
    """

    async def resolve(self, rule: Any, company_id: int) -> Optional[int]:
        return rule.assigned_user_id


class RoleBasedStrategy(AssignmentStrategy):
    """First active user (lowest id) holding the rule's role."""

    def __init__(self, user_repo: UserRepository) -> None:
        self._user_repo = user_repo

    async def resolve(self, rule: Any, company_id: int) -> Optional[int]:
        if rule.assigned_role_id is None:
            return None
        users = await self._user_repo.list_active(company_id, rule.assigned_role_id)
        return users[0].id if users else None


class _LeastLoadedStrategy(AssignmentStrategy):
    """Pick the active user with the smallest workload.

    The pool is the company's active users, narrowed to the rule's role
    when one is set.  Ties go to the lowest user id.
    """

    workload_type: AssignmentType

    def __init__(self, user_repo: UserRepository, workload: WorkloadCalculator) -> None:
        self._user_repo = user_repo
        self._workload = workload

    async def resolve(self, rule: Any, company_id: int) -> Optional[int]:
        candidates = await self._user_repo.list_active(
            company_id, rule.assigned_role_id
        )
        if not candidates:
            return None

        loads = await self._workload.loads(
            [u.id for u in candidates], company_id, self.workload_type
        )
        chosen = min(candidates, key=lambda u: (loads.get(u.id, 0), u.id))
        logger.debug(
            "%s workloads for company %s: %s -> user %s",
            self.workload_type.value,
            company_id,
            loads,
            chosen.id,
        )
        return chosen.id


class RoundRobinStrategy(_LeastLoadedStrategy):
    workload_type = AssignmentType.round_robin


class LoadBalanceStrategy(_LeastLoadedStrategy):
    workload_type = AssignmentType.load_balance


class AssignmentResolver:
    """Dispatch a rule to the strategy registered for its assignment type."""

    def __init__(self, user_repo: UserRepository, workload: WorkloadCalculator) -> None:
        self._strategies: Dict[AssignmentType, AssignmentStrategy] = {
            AssignmentType.specific_user: SpecificUserStrategy(),
            AssignmentType.role_based: RoleBasedStrategy(user_repo),
            AssignmentType.round_robin: RoundRobinStrategy(user_repo, workload),
            AssignmentType.load_balance: LoadBalanceStrategy(user_repo, workload),
        }

    async def resolve(self, rule: Any, company_id: int) -> Optional[int]:
        """Return the user the rule assigns to, or ``None`` if nobody fits."""
        try:
            assignment_type = AssignmentType(rule.assignment_type)
        except ValueError:
            logger.warning(
                "Routing rule %s has unknown assignment type %r",
                rule.id,
                rule.assignment_type,
            )
            return None
        return await self._strategies[assignment_type].resolve(rule, company_id)
