"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os
from datetime import datetime

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db.database import get_db
# Import all models to ensure all tables are created
from app.db.models import Base, Property, DealScenario, RenovationItem
from app.calculations import models as engine_models
from app.calculations.renovation import RenovationStatus


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")


# Create a shared test database engine
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"
test_engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


def override_get_db():
    """Override database dependency for testing."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


# Override the dependency globally for all tests
app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test and drop after."""
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def db_session():
    """Create database session for test setup."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


# ============================================================================
# ENGINE SNAPSHOTS
# ============================================================================

@pytest.fixture
def rental_property():
    """Property baseline used by the rental examples."""
    return engine_models.PropertySnapshot(
        id="prop-1",
        purchase_price=250000,
        current_value=300000,
        arv=310000,
        type=engine_models.ExitStrategy.rent,
    )


@pytest.fixture
def rental_scenario():
    """Long-term rental example deal."""
    return engine_models.DealScenario(
        id="rent-1",
        name="Long-term rental",
        created_at=datetime(2025, 1, 1),
        purchase_price=250000,
        rehab_cost=20000,
        holding_costs=5000,
        closing_costs=5000,
        interest_rate=6,
        hold_time_months=12,
        exit_strategy=engine_models.ExitStrategy.rent,
        monthly_rent=2200,
        occupancy_rate=95,
    )


@pytest.fixture
def airbnb_scenario():
    """Short-term rental example deal."""
    return engine_models.DealScenario(
        id="airbnb-1",
        name="Airbnb",
        created_at=datetime(2025, 1, 2),
        purchase_price=250000,
        rehab_cost=20000,
        holding_costs=5000,
        closing_costs=5000,
        interest_rate=6,
        hold_time_months=12,
        exit_strategy=engine_models.ExitStrategy.airbnb,
        daily_rate=150,
        average_occupancy=70,
    )


@pytest.fixture
def flip_scenario():
    """Buy-renovate-sell example deal."""
    return engine_models.DealScenario(
        id="flip-1",
        name="Flip",
        created_at=datetime(2025, 1, 3),
        purchase_price=100000,
        rehab_cost=30000,
        holding_costs=5000,
        closing_costs=3000,
        interest_rate=0,
        hold_time_months=6,
        exit_strategy=engine_models.ExitStrategy.flip,
        sale_price=180000,
        selling_costs=12000,
    )


# ============================================================================
# DATABASE ROWS
# ============================================================================

@pytest.fixture
def test_property(db_session):
    """Create a test property."""
    prop = Property(
        name="Test Property",
        address_street="123 Test St",
        address_city="Test City",
        address_state="FL",
        address_zip="12345",
        property_type=engine_models.ExitStrategy.rent,
        status=engine_models.PropertyStatus.analyzing,
        sqft=1800,
        bedrooms=3,
        bathrooms=2,
        purchase_price=250000,
        current_value=300000,
    )
    db_session.add(prop)
    db_session.commit()
    db_session.refresh(prop)
    return prop


@pytest.fixture
def test_scenario(db_session, test_property):
    """Create a stored rental scenario (not yet analyzed)."""
    scenario = DealScenario(
        property_id=test_property.id,
        name="Base Rental",
        purchase_price=250000,
        rehab_cost=20000,
        holding_costs=5000,
        closing_costs=5000,
        interest_rate=6,
        hold_time_months=12,
        exit_strategy=engine_models.ExitStrategy.rent,
        monthly_rent=2200,
        occupancy_rate=95,
        created_at=datetime(2025, 1, 1),
    )
    db_session.add(scenario)
    db_session.commit()
    db_session.refresh(scenario)
    return scenario


@pytest.fixture
def test_flip_scenario(db_session, test_property):
    """Create a stored flip scenario."""
    scenario = DealScenario(
        property_id=test_property.id,
        name="Quick Flip",
        purchase_price=100000,
        rehab_cost=30000,
        holding_costs=5000,
        closing_costs=3000,
        interest_rate=0,
        hold_time_months=6,
        exit_strategy=engine_models.ExitStrategy.flip,
        sale_price=180000,
        selling_costs=12000,
        created_at=datetime(2025, 1, 2),
    )
    db_session.add(scenario)
    db_session.commit()
    db_session.refresh(scenario)
    return scenario


@pytest.fixture
def test_renovations(db_session, test_property):
    """Create renovation items for the test property."""
    items = [
        RenovationItem(
            property_id=test_property.id,
            category="kitchen",
            description="Cabinets and counters",
            estimated_cost=15000,
            actual_cost=16500,
            status=RenovationStatus.completed,
        ),
        RenovationItem(
            property_id=test_property.id,
            category="flooring",
            description="LVP throughout",
            estimated_cost=5000,
            status=RenovationStatus.pending,
        ),
    ]
    db_session.add_all(items)
    db_session.commit()
    return items
