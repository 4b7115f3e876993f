import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from lead_router.core.cache import CacheService
from lead_router.core.config import settings
from lead_router.core.constants import ROUTING_LOCK_KEY_PREFIX
from lead_router.core.exceptions import AssigneeNotFoundError, LeadNotFoundError
from lead_router.models.lead import Lead
from lead_router.models.routing_rule import LeadRoutingRule
from lead_router.repositories.lead_repository import LeadRepository
from lead_router.repositories.routing_rule_repository import RoutingRuleRepository
from lead_router.repositories.user_repository import UserRepository
from lead_router.schemas.routing import LeadSnapshot
from lead_router.services.assignment_resolver import AssignmentResolver
from lead_router.services.condition_matcher import rule_matches

logger = logging.getLogger(__name__)


class LeadRoutingService:
    """Assign a lead to a sales agent using the company's routing rules.

    Active rules are evaluated highest priority first.  The first rule
    whose conditions match the lead is the only one resolved:

    - resolver returns a user → the lead's ``assigned_to`` is written and
      committed, and the updated lead is returned;
    - resolver returns ``None`` → the lead is returned unchanged, unless
      ``fallthrough_on_unresolved`` is on, in which case evaluation
      continues with the next rule;
    - no rule matches → the lead is returned unchanged.

    Routing is not idempotent: round-robin and load-balance read live
    workload, so routing the same lead twice can pick different users.

    With ``tenant_lock_enabled`` the whole read-evaluate-write sequence
    runs under a per-company Redis lock so concurrent calls observe each
    other's assignments.  Without Redis the lock is skipped.
    """

    def __init__(
        self,
        lead_repo: LeadRepository,
        rule_repo: RoutingRuleRepository,
        user_repo: UserRepository,
        resolver: AssignmentResolver,
        cache: Optional[CacheService] = None,
        fallthrough_on_unresolved: Optional[bool] = None,
        tenant_lock_enabled: Optional[bool] = None,
    ) -> None:
        self._lead_repo = lead_repo
        self._rule_repo = rule_repo
        self._user_repo = user_repo
        self._resolver = resolver
        self._cache: CacheService = cache or CacheService()
        self._fallthrough = (
            settings.ROUTING_FALLTHROUGH_ON_UNRESOLVED
            if fallthrough_on_unresolved is None
            else fallthrough_on_unresolved
        )
        self._tenant_lock_enabled = (
            settings.ROUTING_TENANT_LOCK_ENABLED
            if tenant_lock_enabled is None
            else tenant_lock_enabled
        )

    async def route_lead(self, lead_id: int, company_id: int) -> Lead:
        """Route one lead; see the class docstring for the outcomes.

        Raises ``LeadNotFoundError`` when the lead is not in the company
        and ``AssigneeNotFoundError`` when the resolved user is not.
        Database errors from the final write are re-raised after a
        rollback.
        """
        if not self._tenant_lock_enabled:
            return await self._route(lead_id, company_id)

        lock_key = f"{ROUTING_LOCK_KEY_PREFIX}:{company_id}"
        async with self._cache.lock(
            lock_key,
            timeout=settings.ROUTING_TENANT_LOCK_TIMEOUT,
            blocking_timeout=settings.ROUTING_TENANT_LOCK_TIMEOUT,
        ) as acquired:
            if not acquired:
                logger.warning(
                    "Routing lead %s without company lock %s", lead_id, lock_key
                )
            return await self._route(lead_id, company_id)

    async def _route(self, lead_id: int, company_id: int) -> Lead:
        lead = await self._lead_repo.get_by_id(lead_id, company_id)
        if lead is None:
            raise LeadNotFoundError(f"Lead {lead_id} not found")

        rules = await self._rule_repo.list_active(company_id)
        if not rules:
            logger.info("Company %s has no active routing rules", company_id)
            return lead

        snapshot = LeadSnapshot.from_lead(lead)

        for rule in rules:
            if not rule_matches(snapshot, rule):
                continue

            user_id = await self._resolver.resolve(rule, company_id)
            if user_id is not None:
                return await self._assign(lead, user_id, company_id, rule)

            logger.warning(
                "Routing rule %s (%s) matched lead %s but resolved no user",
                rule.id,
                rule.rule_name,
                lead_id,
            )
            if not self._fallthrough:
                return lead

        logger.info("No routing rule assigned lead %s", lead_id)
        return lead

    async def _assign(
        self, lead: Lead, user_id: int, company_id: int, rule: LeadRoutingRule
    ) -> Lead:
        user = await self._user_repo.get_in_company(user_id, company_id)
        if user is None:
            raise AssigneeNotFoundError(
                f"User {user_id} not found in company {company_id}"
            )

        try:
            await self._lead_repo.set_assignee(lead, user)
            await self._lead_repo.commit()
        except SQLAlchemyError:
            logger.error(
                "Failed to persist assignment of lead %s to user %s",
                lead.id,
                user_id,
                exc_info=True,
            )
            await self._lead_repo.rollback()
            raise

        logger.info(
            "Lead %s routed to user %s by rule %s (%s, %s)",
            lead.id,
            user_id,
            rule.id,
            rule.rule_name,
            rule.assignment_type,
        )
        return lead
