"""
Persistence collaborator for the analysis engine.

The engine only sees immutable snapshots; this module reads them from the
database and writes analysis results back.
"""

import logging
from datetime import datetime
from typing import List, Optional, Protocol, Tuple

from sqlalchemy.orm import Session

from app.calculations import models as engine
from app.db.models import DealScenario, Property

logger = logging.getLogger(__name__)


def to_property_snapshot(prop: Property) -> engine.PropertySnapshot:
    """Freeze a Property row for the engine."""
    address = ", ".join(
        part
        for part in (prop.address_street, prop.address_city, prop.address_state, prop.address_zip)
        if part
    )
    return engine.PropertySnapshot(
        id=prop.id,
        address=address or None,
        purchase_price=prop.purchase_price,
        current_value=prop.current_value,
        arv=prop.arv,
        sqft=prop.sqft,
        bedrooms=prop.bedrooms,
        bathrooms=prop.bathrooms,
        year_built=prop.year_built,
        lot_size=prop.lot_size,
        type=prop.property_type or engine.ExitStrategy.rent,
        status=prop.status or engine.PropertyStatus.lead,
    )


def to_scenario_snapshot(scenario: DealScenario) -> engine.DealScenario:
    """Freeze a DealScenario row for the engine."""
    return engine.DealScenario(
        id=scenario.id,
        name=scenario.name,
        property_id=scenario.property_id,
        created_at=scenario.created_at,
        purchase_price=scenario.purchase_price,
        rehab_cost=scenario.rehab_cost,
        holding_costs=scenario.holding_costs,
        closing_costs=scenario.closing_costs,
        interest_rate=scenario.interest_rate,
        hold_time_months=scenario.hold_time_months,
        exit_strategy=engine.ExitStrategy(scenario.exit_strategy),
        monthly_rent=scenario.monthly_rent,
        occupancy_rate=scenario.occupancy_rate,
        daily_rate=scenario.daily_rate,
        average_occupancy=scenario.average_occupancy,
        sale_price=scenario.sale_price,
        selling_costs=scenario.selling_costs,
    )


class ScenarioRepository(Protocol):
    """What the analysis endpoints need from storage."""

    def get_property(self, property_id: str) -> Optional[engine.PropertySnapshot]:
        ...

    def get_scenario_with_property(
        self, scenario_id: str
    ) -> Optional[Tuple[engine.DealScenario, engine.PropertySnapshot]]:
        ...

    def list_scenarios(
        self, property_id: str, scenario_ids: Optional[List[str]] = None
    ) -> List[engine.DealScenario]:
        ...

    def save_analysis(self, scenario_id: str, result: engine.AnalysisResult) -> None:
        ...


class SqlScenarioRepository:
    """ScenarioRepository backed by a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def _property_row(self, property_id: str) -> Optional[Property]:
        return (
            self.db.query(Property)
            .filter(Property.id == property_id, Property.is_deleted == False)
            .first()
        )

    def _scenario_row(self, scenario_id: str) -> Optional[DealScenario]:
        return (
            self.db.query(DealScenario)
            .filter(DealScenario.id == scenario_id, DealScenario.is_deleted == False)
            .first()
        )

    def get_property(self, property_id: str) -> Optional[engine.PropertySnapshot]:
        prop = self._property_row(property_id)
        return to_property_snapshot(prop) if prop else None

    def get_scenario_with_property(
        self, scenario_id: str
    ) -> Optional[Tuple[engine.DealScenario, engine.PropertySnapshot]]:
        scenario = self._scenario_row(scenario_id)
        if not scenario or scenario.property.is_deleted:
            return None
        return to_scenario_snapshot(scenario), to_property_snapshot(scenario.property)

    def list_scenarios(
        self, property_id: str, scenario_ids: Optional[List[str]] = None
    ) -> List[engine.DealScenario]:
        query = self.db.query(DealScenario).filter(
            DealScenario.property_id == property_id,
            DealScenario.is_deleted == False,
        )
        if scenario_ids:
            query = query.filter(DealScenario.id.in_(scenario_ids))
        rows = query.order_by(DealScenario.created_at).all()
        return [to_scenario_snapshot(row) for row in rows]

    def save_analysis(self, scenario_id: str, result: engine.AnalysisResult) -> None:
        scenario = self._scenario_row(scenario_id)
        if not scenario:
            raise LookupError(f"Scenario {scenario_id} not found")

        for field, value in result.to_metrics().items():
            setattr(scenario, field, value)
        scenario.analyzed_at = datetime.utcnow()

        self.db.commit()
        logger.info("Saved analysis for scenario %s (roi=%s)", scenario_id, result.roi)
