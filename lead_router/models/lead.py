from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from lead_router.models.base import Base


class Lead(Base):
    """Inbound sales prospect, scoped to one company.

    Routing reads the source, property/interest type, budget range and
    preferred areas, and writes only ``assigned_to``.  A ``NULL``
    ``status_id`` marks a lead nobody has worked yet; such leads count
    towards an agent's load-balance workload.
    """

    __tablename__ = "leads"
    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, nullable=False)
    name = Column(String(200), nullable=False)
    email = Column(String(255))
    phone = Column(String(30))
    activity_source_id = Column(Integer)
    property_type = Column(String(50))
    interest_type = Column(String(50))
    min_price = Column(Numeric(15, 2))
    max_price = Column(Numeric(15, 2))
    status_id = Column(Integer)
    assigned_to = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())

    assigned_user = relationship("User", foreign_keys=[assigned_to])
    preferred_areas = relationship(
        "LeadPreferredArea", back_populates="lead", cascade="all, delete-orphan"
    )
    followups = relationship(
        "LeadFollowup", back_populates="lead", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("ix_leads_company_assigned_status", "company_id", "assigned_to", "status_id"),
        CheckConstraint(
            "min_price IS NULL OR max_price IS NULL OR min_price <= max_price",
            name="ck_leads_price_range",
        ),
    )


class LeadPreferredArea(Base):
    __tablename__ = "lead_preferred_areas"
    id = Column(Integer, primary_key=True)
    lead_id = Column(Integer, ForeignKey("leads.id", ondelete="CASCADE"), nullable=False)
    area_id = Column(Integer, ForeignKey("areas.id", ondelete="CASCADE"), nullable=False)

    lead = relationship("Lead", back_populates="preferred_areas")
    area = relationship("Area")

    __table_args__ = (
        UniqueConstraint("lead_id", "area_id", name="uq_lead_preferred_area"),
    )
