from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from lead_router.models.base import Base


class State(Base):
    """Emirate / state; its ``name`` is what routing rules call ``city``."""

    __tablename__ = "states"
    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)

    areas = relationship("Area", back_populates="state")


class Area(Base):
    __tablename__ = "areas"
    id = Column(Integer, primary_key=True)
    state_id = Column(Integer, ForeignKey("states.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(150), nullable=False)

    state = relationship("State", back_populates="areas")
