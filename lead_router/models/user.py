from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func, true

from lead_router.models.base import Base


class Role(Base):
    __tablename__ = "roles"
    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, nullable=False, index=True)
    name = Column(String(100), nullable=False)

    users = relationship("User", back_populates="role")


class User(Base):
    """Sales agent (or any CRM user) that leads can be assigned to.

    Only active users are routing candidates.  ``role_id`` narrows the
    candidate pool for ``role_based`` rules and, when set on the rule,
    for ``round_robin`` and ``load_balance`` rules too.
    """

    __tablename__ = "users"
    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, nullable=False)
    name = Column(String(200), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    role_id = Column(Integer, ForeignKey("roles.id", ondelete="SET NULL"))
    is_active = Column(Boolean, nullable=False, server_default=true())
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())

    role = relationship("Role", back_populates="users")

    __table_args__ = (
        Index("ix_users_company_active_role", "company_id", "is_active", "role_id"),
    )
