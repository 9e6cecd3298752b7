"""
Seed the database with a demo single-family property.
Creates one scenario per exit strategy plus a renovation budget, analyzed
with the configured assumptions.
"""
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.api.scenarios import apply_analysis
from app.calculations.models import AnalysisAssumptions, ExitStrategy, PropertyStatus
from app.calculations.renovation import RenovationStatus
from app.config import get_settings
from app.db.database import get_db_context, init_db
from app.db.models import DealScenario, Property, RenovationItem

DEMO_NAME = "412 Palmetto Dr"

RENOVATIONS = [
    ("kitchen", "Cabinets, counters and appliances", 18000, RenovationStatus.pending),
    ("bathroom", "Two full bath refresh", 9000, RenovationStatus.pending),
    ("flooring", "LVP throughout", 7500, RenovationStatus.pending),
    ("exterior", "Paint and landscaping", 5500, RenovationStatus.pending),
]

SHARED_INPUTS = {
    "purchase_price": 215000,
    "rehab_cost": 40000,
    "holding_costs": 6000,
    "closing_costs": 6500,
    "interest_rate": 7.0,
}


def seed(db):
    assumptions = AnalysisAssumptions.from_settings(get_settings())

    existing = db.query(Property).filter(Property.name == DEMO_NAME).first()
    if existing:
        print(f"Property '{DEMO_NAME}' already exists (ID: {existing.id})")
        return

    property = Property(
        name=DEMO_NAME,
        address_street="412 Palmetto Dr",
        address_city="Tampa",
        address_state="FL",
        address_zip="33604",
        property_type=ExitStrategy.flip,
        status=PropertyStatus.analyzing,
        sqft=1650,
        bedrooms=3,
        bathrooms=2,
        year_built=1978,
        lot_size=0.18,
        purchase_price=215000,
        current_value=240000,
        arv=335000,
    )
    db.add(property)
    db.flush()
    print(f"Created property: {property.name} (ID: {property.id})")

    for category, description, cost, status in RENOVATIONS:
        db.add(
            RenovationItem(
                property_id=property.id,
                category=category,
                description=description,
                estimated_cost=cost,
                status=status,
            )
        )

    scenarios = [
        DealScenario(
            property_id=property.id,
            name="Long-term rental",
            hold_time_months=60,
            exit_strategy=ExitStrategy.rent,
            monthly_rent=2450,
            occupancy_rate=95,
            **SHARED_INPUTS,
        ),
        DealScenario(
            property_id=property.id,
            name="Furnished Airbnb",
            hold_time_months=60,
            exit_strategy=ExitStrategy.airbnb,
            daily_rate=165,
            average_occupancy=62,
            **SHARED_INPUTS,
        ),
        DealScenario(
            property_id=property.id,
            name="Six-month flip",
            hold_time_months=6,
            exit_strategy=ExitStrategy.flip,
            sale_price=335000,
            selling_costs=20100,
            **SHARED_INPUTS,
        ),
    ]

    for scenario in scenarios:
        result = apply_analysis(scenario, property, assumptions)
        db.add(scenario)
        db.flush()
        print(
            f"Created scenario: {scenario.name} (ID: {scenario.id}) "
            f"ROI {result.roi}% profit ${result.total_profit:,.2f}"
        )

    print("\nDemo property and scenarios created successfully!")


def main():
    init_db()
    try:
        with get_db_context() as db:
            seed(db)
    except Exception as e:
        print(f"Error: {e}")
        raise


if __name__ == "__main__":
    main()
