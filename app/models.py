import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

USER_ROLES = ("superadmin", "admin", "agent", "client")
PROPERTY_TYPES = ("sale", "rental")
PROPERTY_STATUSES = ("published", "draft", "featured", "inactive")


def generate_id():
    """Generate a string primary key"""
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=True)  # bcrypt hash, never serialized
    phone = Column(String(50), nullable=True)
    avatar_url = Column(String(500), nullable=True)
    role = Column(String(20), default="client", nullable=False, index=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    agent_visits = relationship(
        "Visit", back_populates="agent", foreign_keys="Visit.agent_id"
    )
    client_visits = relationship(
        "Visit", back_populates="client", foreign_keys="Visit.client_id"
    )
    assigned_properties = relationship("AgentProperty", back_populates="agent")
    availability = relationship("AgentAvailability", back_populates="agent", uselist=False)


class Property(Base):
    __tablename__ = "properties"

    id = Column(String(36), primary_key=True, default=generate_id)
    title = Column(String(255), nullable=False)
    price = Column(Float, nullable=False)
    location = Column(String(255), nullable=False, index=True)
    image = Column(String(500), nullable=True)
    bedrooms = Column(Integer, default=0, nullable=False)
    bathrooms = Column(Integer, default=0, nullable=False)
    area = Column(Float, nullable=False)
    type = Column(String(20), nullable=False, index=True)  # sale, rental
    description = Column(Text, nullable=True)
    property_type = Column(String(100), nullable=True)  # Apartment, Penthouse, ...
    address = Column(String(500), nullable=True)
    features = Column(JSON, default=list, nullable=False)
    # published, draft, featured, inactive
    status = Column(String(20), default="draft", nullable=False, index=True)
    is_new = Column(Boolean, default=False, nullable=False)
    is_featured = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    visits = relationship("Visit", back_populates="property")
    agents = relationship("AgentProperty", back_populates="property")


class AgentProperty(Base):
    """Assignment of an agent to a property listing"""

    __tablename__ = "agent_properties"
    __table_args__ = (UniqueConstraint("agent_id", "property_id", name="uq_agent_property"),)

    id = Column(Integer, primary_key=True, index=True)
    agent_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    property_id = Column(String(36), ForeignKey("properties.id"), nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now())

    agent = relationship("User", back_populates="assigned_properties")
    property = relationship("Property", back_populates="agents")
