"""
Visit scheduling models
"""

from sqlalchemy import JSON, Column, Date, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base
from .models import generate_id

VISIT_TYPES = ("in-person", "video-call")
VISIT_STATUSES = ("pending", "confirmed", "cancelled", "completed")
# Visits in these states block the conflict window on their property
ACTIVE_VISIT_STATUSES = ("pending", "confirmed")


class Visit(Base):
    """A scheduled viewing of a property by a client, optionally with an agent"""

    __tablename__ = "visits"

    id = Column(String(36), primary_key=True, default=generate_id)

    property_id = Column(String(36), ForeignKey("properties.id"), nullable=False, index=True)
    client_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    agent_id = Column(String(36), ForeignKey("users.id"), nullable=True, index=True)

    # Scheduling
    date = Column(Date, nullable=False, index=True)
    time = Column(String(5), nullable=False)  # HH:MM, 24h

    type = Column(String(20), nullable=False)  # in-person, video-call

    # Status workflow: pending → confirmed → completed
    # pending and confirmed may also move to cancelled; completed and cancelled are terminal
    status = Column(String(20), default="pending", nullable=False, index=True)

    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    property = relationship("Property", back_populates="visits")
    client = relationship("User", back_populates="client_visits", foreign_keys=[client_id])
    agent = relationship("User", back_populates="agent_visits", foreign_keys=[agent_id])


class AgentAvailability(Base):
    """Recurring weekly schedule template for an agent"""

    __tablename__ = "agent_availability"

    id = Column(String(36), primary_key=True, default=generate_id)
    agent_id = Column(String(36), ForeignKey("users.id"), unique=True, nullable=False)
    # {"monday": {"enabled": true, "timeSlots": [{"id", "startTime", "endTime"}]}, ...}
    week_data = Column(JSON, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    agent = relationship("User", back_populates="availability")
