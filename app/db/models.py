"""
SQLAlchemy ORM models for the portfolio manager.
"""

from datetime import datetime
from sqlalchemy import (
    Column,
    String,
    Float,
    Integer,
    Boolean,
    DateTime,
    ForeignKey,
    Text,
    Enum as SQLEnum,
)
from sqlalchemy.orm import declarative_base, relationship
import uuid

from app.calculations.models import ExitStrategy, PropertyStatus
from app.calculations.renovation import RenovationStatus

Base = declarative_base()


def generate_uuid():
    return str(uuid.uuid4())


class AuditMixin:
    """Mixin for audit fields on all models."""

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )
    created_by = Column(String(255), nullable=True)
    updated_by = Column(String(255), nullable=True)
    is_deleted = Column(Boolean, default=False, nullable=False)


class Property(AuditMixin, Base):
    """Property model representing a real estate asset."""

    __tablename__ = "properties"

    id = Column(String, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)

    # Address
    address_street = Column(String(255))
    address_city = Column(String(100))
    address_state = Column(String(50))
    address_zip = Column(String(20))

    # Property details
    property_type = Column(SQLEnum(ExitStrategy), default=ExitStrategy.rent, nullable=False)
    status = Column(SQLEnum(PropertyStatus), default=PropertyStatus.lead, nullable=False)
    sqft = Column(Float)
    bedrooms = Column(Integer)
    bathrooms = Column(Float)
    year_built = Column(Integer)
    lot_size = Column(Float)

    # Valuation
    purchase_price = Column(Float)
    current_value = Column(Float)
    arv = Column(Float)  # After-repair value

    # Relationships
    scenarios = relationship(
        "DealScenario",
        back_populates="property",
        cascade="all, delete-orphan",
        lazy="dynamic",
    )
    renovations = relationship(
        "RenovationItem",
        back_populates="property",
        cascade="all, delete-orphan",
        lazy="dynamic",
    )


class DealScenario(AuditMixin, Base):
    """What-if deal analysis for a property."""

    __tablename__ = "deal_scenarios"

    id = Column(String, primary_key=True, default=generate_uuid)
    property_id = Column(String, ForeignKey("properties.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)

    # Shared inputs
    purchase_price = Column(Float, nullable=False)
    rehab_cost = Column(Float, default=0.0, nullable=False)
    holding_costs = Column(Float, default=0.0, nullable=False)
    closing_costs = Column(Float, default=0.0, nullable=False)
    interest_rate = Column(Float, default=0.0, nullable=False)  # Annual percent
    hold_time_months = Column(Integer, nullable=False)
    exit_strategy = Column(SQLEnum(ExitStrategy), nullable=False)

    # Rental
    monthly_rent = Column(Float)
    occupancy_rate = Column(Float)

    # Short-term rental
    daily_rate = Column(Float)
    average_occupancy = Column(Float)

    # Flip
    sale_price = Column(Float)
    selling_costs = Column(Float)

    # Calculated results
    cap_rate = Column(Float)
    cash_on_cash = Column(Float)
    roi = Column(Float)
    monthly_noi = Column(Float)
    total_profit = Column(Float)
    irr = Column(Float)  # Annualized percent
    npv = Column(Float)
    analyzed_at = Column(DateTime)

    # Relationships
    property = relationship("Property", back_populates="scenarios")


class RenovationItem(AuditMixin, Base):
    """Renovation cost line for a property."""

    __tablename__ = "renovation_items"

    id = Column(String, primary_key=True, default=generate_uuid)
    property_id = Column(String, ForeignKey("properties.id"), nullable=False, index=True)

    category = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    estimated_cost = Column(Float, nullable=False)
    actual_cost = Column(Float)
    contractor = Column(String(255))
    status = Column(
        SQLEnum(RenovationStatus), default=RenovationStatus.pending, nullable=False
    )
    notes = Column(Text)

    # Relationships
    property = relationship("Property", back_populates="renovations")
