from typing import FrozenSet

from lead_router.schemas.common import AssignmentType

ASSIGNMENT_TYPE_CHECK_CLAUSE: str = (
    f"assignment_type IN ({', '.join(repr(t.value) for t in AssignmentType)})"
)

# Strategies whose result depends on live per-user workload
WORKLOAD_STRATEGIES: FrozenSet[AssignmentType] = frozenset(
    {AssignmentType.round_robin, AssignmentType.load_balance}
)

# Redis key prefix for the per-company routing lock
ROUTING_LOCK_KEY_PREFIX: str = "routing:lock"

DEFAULT_PAGE_SIZE: int = 20
MAX_PAGE_SIZE: int = 100
