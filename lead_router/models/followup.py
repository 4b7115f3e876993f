from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from lead_router.models.base import Base


class LeadFollowup(Base):
    """Scheduled follow-up on a lead.

    A follow-up is open while ``next_followup_date`` is set; once that
    date has passed it is due and adds to the assignee's workload.
    """

    __tablename__ = "lead_followups"
    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, nullable=False)
    lead_id = Column(Integer, ForeignKey("leads.id", ondelete="CASCADE"), nullable=False)
    next_followup_date = Column(DateTime(timezone=True))
    notes = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())

    lead = relationship("Lead", back_populates="followups")

    __table_args__ = (
        Index("ix_lead_followups_lead_next_date", "lead_id", "next_followup_date"),
    )
