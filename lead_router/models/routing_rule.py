from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func, true

from lead_router.core.constants import ASSIGNMENT_TYPE_CHECK_CLAUSE
from lead_router.models.base import Base


class LeadRoutingRule(Base):
    """Company-scoped routing rule: a condition predicate plus a strategy.

    ``conditions`` holds a JSON object as text (see
    ``RoutingConditions``).  Rules are evaluated by ``priority``
    descending; equal priorities fall back to ``id`` ascending, i.e.
    insertion order.  Which of ``assigned_user_id`` / ``assigned_role_id``
    is meaningful depends on ``assignment_type``; the other is ignored.
    """

    __tablename__ = "lead_routing_rules"
    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, nullable=False)
    rule_name = Column(String(150), nullable=False)
    priority = Column(Integer, nullable=False, server_default="0")
    is_active = Column(Boolean, nullable=False, server_default=true())
    conditions = Column(Text, nullable=False, server_default="{}")
    assignment_type = Column(String(30), nullable=False)
    assigned_user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"))
    assigned_role_id = Column(Integer, ForeignKey("roles.id", ondelete="SET NULL"))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())

    assigned_user = relationship("User", foreign_keys=[assigned_user_id])
    assigned_role = relationship("Role", foreign_keys=[assigned_role_id])

    __table_args__ = (
        Index(
            "ix_routing_rules_company_active_priority",
            "company_id",
            "is_active",
            "priority",
        ),
        CheckConstraint(ASSIGNMENT_TYPE_CHECK_CLAUSE, name="ck_routing_rule_assignment_type"),
    )
