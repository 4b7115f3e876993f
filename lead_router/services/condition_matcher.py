"""Structural matching of routing-rule conditions against a lead.

Stored conditions are parsed into :class:`RoutingConditions` once per
distinct stored text and memoised; a rule whose conditions cannot be
parsed never matches and never raises.
"""

import logging
from functools import lru_cache
from typing import Any, Union

from pydantic import ValidationError

from lead_router.core.config import settings
from lead_router.core.exceptions import MalformedConditionsError
from lead_router.schemas.routing import LeadSnapshot, RoutingConditions

logger = logging.getLogger(__name__)


@lru_cache(maxsize=settings.CONDITIONS_PARSE_CACHE_SIZE)
def _parse_text(raw: Union[str, bytes]) -> RoutingConditions:
    try:
        return RoutingConditions.model_validate_json(raw)
    except ValidationError as exc:
        raise MalformedConditionsError(
            f"Invalid routing conditions ({exc.error_count()} error(s))"
        ) from exc


def parse_conditions(raw: Any) -> RoutingConditions:
    """Parse stored rule conditions (JSON text or an already-decoded dict).

    Raises ``MalformedConditionsError`` for invalid JSON, non-object
    JSON, wrongly typed fields, or an unsupported storage type.
    """
    if isinstance(raw, RoutingConditions):
        return raw
    if isinstance(raw, (str, bytes)):
        return _parse_text(raw)
    if isinstance(raw, dict):
        try:
            return RoutingConditions.model_validate(raw)
        except ValidationError as exc:
            raise MalformedConditionsError(
                f"Invalid routing conditions ({exc.error_count()} error(s))"
            ) from exc
    raise MalformedConditionsError(
        f"Unsupported routing conditions type: {type(raw).__name__}"
    )


def matches(lead: LeadSnapshot, conditions: RoutingConditions) -> bool:
    """Return ``True`` when *lead* satisfies every condition that is set."""
    if (
        conditions.activity_source_id is not None
        and lead.activity_source_id != conditions.activity_source_id
    ):
        return False

    if conditions.property_type is not None and lead.property_type != conditions.property_type:
        return False

    if conditions.interest_type is not None and lead.interest_type != conditions.interest_type:
        return False

    # Budget: the lead's floor must reach the rule's floor and its ceiling
    # must stay under the rule's ceiling.  An unknown bound satisfies nothing.
    if conditions.min_price is not None and (
        lead.min_price is None or lead.min_price < conditions.min_price
    ):
        return False

    if conditions.max_price is not None and (
        lead.max_price is None or lead.max_price > conditions.max_price
    ):
        return False

    if conditions.area_ids and conditions.area_ids.isdisjoint(lead.area_ids):
        return False

    if conditions.city is not None and conditions.city not in lead.cities:
        return False

    if conditions.state_id is not None and conditions.state_id not in lead.state_ids:
        return False

    return True


def rule_matches(lead: LeadSnapshot, rule: Any) -> bool:
    """Match *rule*'s stored conditions, treating bad conditions as no match."""
    try:
        conditions = parse_conditions(rule.conditions)
    except MalformedConditionsError as exc:
        logger.warning(
            "Skipping routing rule %s (%s): %s",
            rule.id,
            getattr(rule, "rule_name", ""),
            exc.detail,
        )
        return False
    return matches(lead, conditions)
