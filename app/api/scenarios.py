"""
Deal scenario API endpoints.

Scenarios are re-analyzed whenever their inputs change; invalid inputs are
rejected before anything is written.
"""

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.dependencies import get_assumptions
from app.api.properties import get_property_or_404
from app.api.renovations import budget_for_property
from app.api.schemas import AmortizationRow, AnalysisResponse, result_to_response
from app.calculations.amortization import schedule_to_rows, summarize_schedule
from app.calculations.analyzer import CALCULATORS, analyze
from app.calculations.models import AnalysisAssumptions, AnalysisResult, ExitStrategy
from app.db.database import get_db, get_repository
from app.db.models import DealScenario, Property
from app.db.repository import (
    ScenarioRepository,
    to_property_snapshot,
    to_scenario_snapshot,
)

logger = logging.getLogger(__name__)

router = APIRouter()


class ScenarioCreate(BaseModel):
    """Schema for creating a scenario."""

    property_id: str
    name: str
    description: Optional[str] = None

    # Shared inputs
    purchase_price: float
    rehab_cost: Optional[float] = None  # Defaults to the renovation estimate
    holding_costs: float = 0.0
    closing_costs: float = 0.0
    interest_rate: float = 0.0
    hold_time_months: int
    exit_strategy: ExitStrategy

    # Strategy-specific inputs
    monthly_rent: Optional[float] = None
    occupancy_rate: Optional[float] = None
    daily_rate: Optional[float] = None
    average_occupancy: Optional[float] = None
    sale_price: Optional[float] = None
    selling_costs: Optional[float] = None


class ScenarioUpdate(BaseModel):
    """Schema for updating a scenario."""

    name: Optional[str] = None
    description: Optional[str] = None
    purchase_price: Optional[float] = None
    rehab_cost: Optional[float] = None
    holding_costs: Optional[float] = None
    closing_costs: Optional[float] = None
    interest_rate: Optional[float] = None
    hold_time_months: Optional[int] = None
    exit_strategy: Optional[ExitStrategy] = None
    monthly_rent: Optional[float] = None
    occupancy_rate: Optional[float] = None
    daily_rate: Optional[float] = None
    average_occupancy: Optional[float] = None
    sale_price: Optional[float] = None
    selling_costs: Optional[float] = None


class ScenarioResponse(BaseModel):
    """Schema for scenario response."""

    id: str
    property_id: str
    name: str
    description: Optional[str]
    purchase_price: float
    rehab_cost: float
    holding_costs: float
    closing_costs: float
    interest_rate: float
    hold_time_months: int
    exit_strategy: ExitStrategy
    monthly_rent: Optional[float]
    occupancy_rate: Optional[float]
    daily_rate: Optional[float]
    average_occupancy: Optional[float]
    sale_price: Optional[float]
    selling_costs: Optional[float]
    cap_rate: Optional[float]
    cash_on_cash: Optional[float]
    roi: Optional[float]
    monthly_noi: Optional[float]
    total_profit: Optional[float]
    irr: Optional[float] = None
    npv: Optional[float] = None
    analyzed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ScenarioListResponse(BaseModel):
    scenarios: List[ScenarioResponse]
    total: int


class ScenarioAnalysisResponse(BaseModel):
    success: bool = True
    scenario: ScenarioResponse
    analysis: AnalysisResponse


class ScheduleResponse(BaseModel):
    scenario_id: str
    summary: dict
    schedule: List[AmortizationRow]


def get_scenario_or_404(db: Session, scenario_id: str) -> DealScenario:
    """Fetch a live scenario row or raise 404."""
    db_scenario = (
        db.query(DealScenario)
        .filter(DealScenario.id == scenario_id, DealScenario.is_deleted == False)
        .first()
    )

    if not db_scenario or db_scenario.property.is_deleted:
        raise HTTPException(status_code=404, detail="Scenario not found")

    return db_scenario


def renovation_estimate(db_property: Property) -> float:
    """Estimated renovation total, used as the default rehab cost."""
    return budget_for_property(db_property)["estimated_total"]


def clear_unused_strategy_fields(db_scenario: DealScenario, keep: set) -> None:
    """Null out inputs belonging to other exit strategies."""
    strategy = ExitStrategy(db_scenario.exit_strategy)
    for other, calculator in CALCULATORS.items():
        if other == strategy:
            continue
        for field in calculator.required_fields:
            if field not in keep:
                setattr(db_scenario, field, None)


def apply_analysis(
    db_scenario: DealScenario,
    db_property: Property,
    assumptions: AnalysisAssumptions,
) -> AnalysisResult:
    """Analyze the row's current inputs and store the metrics on it."""
    result = analyze(
        to_scenario_snapshot(db_scenario),
        to_property_snapshot(db_property),
        assumptions,
    )
    for field, value in result.to_metrics().items():
        setattr(db_scenario, field, value)
    db_scenario.analyzed_at = datetime.utcnow()
    return result


@router.get("/", response_model=ScenarioListResponse)
async def list_scenarios(
    property_id: Optional[str] = None,
    exit_strategy: Optional[ExitStrategy] = None,
    db: Session = Depends(get_db),
):
    """List all scenarios, optionally filtered by property or strategy."""
    query = db.query(DealScenario).filter(DealScenario.is_deleted == False)

    if property_id:
        query = query.filter(DealScenario.property_id == property_id)
    if exit_strategy:
        query = query.filter(DealScenario.exit_strategy == exit_strategy)

    scenarios = query.order_by(DealScenario.created_at.desc()).all()

    return ScenarioListResponse(
        scenarios=[ScenarioResponse.model_validate(s) for s in scenarios],
        total=len(scenarios),
    )


@router.post("/", response_model=ScenarioResponse, status_code=201)
async def create_scenario(
    scenario_data: ScenarioCreate,
    db: Session = Depends(get_db),
    assumptions: AnalysisAssumptions = Depends(get_assumptions),
):
    """Create a scenario and compute its metrics."""
    db_property = get_property_or_404(db, scenario_data.property_id)

    data = scenario_data.model_dump()
    if data["rehab_cost"] is None:
        data["rehab_cost"] = renovation_estimate(db_property)

    db_scenario = DealScenario(**data)
    apply_analysis(db_scenario, db_property, assumptions)

    db.add(db_scenario)
    db.commit()
    db.refresh(db_scenario)

    logger.info("Created scenario %s for property %s", db_scenario.id, db_property.id)

    return ScenarioResponse.model_validate(db_scenario)


@router.get("/{scenario_id}", response_model=ScenarioResponse)
async def get_scenario(scenario_id: str, db: Session = Depends(get_db)):
    """Get a scenario by ID with its stored metrics."""
    return ScenarioResponse.model_validate(get_scenario_or_404(db, scenario_id))


@router.put("/{scenario_id}", response_model=ScenarioResponse)
async def update_scenario(
    scenario_id: str,
    scenario_data: ScenarioUpdate,
    db: Session = Depends(get_db),
    assumptions: AnalysisAssumptions = Depends(get_assumptions),
):
    """Update a scenario's inputs and re-analyze it."""
    db_scenario = get_scenario_or_404(db, scenario_id)

    update_data = scenario_data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(db_scenario, field, value)

    if "exit_strategy" in update_data:
        clear_unused_strategy_fields(db_scenario, keep=set(update_data))

    try:
        apply_analysis(db_scenario, db_scenario.property, assumptions)
    except Exception:
        db.rollback()
        raise

    db.commit()
    db.refresh(db_scenario)

    return ScenarioResponse.model_validate(db_scenario)


@router.delete("/{scenario_id}")
async def delete_scenario(scenario_id: str, db: Session = Depends(get_db)):
    """Soft delete a scenario."""
    db_scenario = get_scenario_or_404(db, scenario_id)

    db_scenario.is_deleted = True
    db.commit()

    return {"deleted": True, "id": scenario_id}


@router.post("/{scenario_id}/analyze", response_model=ScenarioAnalysisResponse)
async def analyze_scenario(
    scenario_id: str,
    include_schedule: bool = False,
    repository: ScenarioRepository = Depends(get_repository),
    assumptions: AnalysisAssumptions = Depends(get_assumptions),
    db: Session = Depends(get_db),
):
    """Run the analysis engine on a stored scenario and persist the metrics."""
    loaded = repository.get_scenario_with_property(scenario_id)
    if loaded is None:
        raise HTTPException(status_code=404, detail="Scenario not found")

    scenario, prop = loaded
    result = analyze(scenario, prop, assumptions, include_schedule=include_schedule)
    repository.save_analysis(scenario_id, result)

    return ScenarioAnalysisResponse(
        scenario=ScenarioResponse.model_validate(get_scenario_or_404(db, scenario_id)),
        analysis=result_to_response(result),
    )


@router.get("/{scenario_id}/schedule", response_model=ScheduleResponse)
async def scenario_schedule(
    scenario_id: str,
    repository: ScenarioRepository = Depends(get_repository),
    assumptions: AnalysisAssumptions = Depends(get_assumptions),
):
    """Mortgage schedule behind a rental scenario's debt service."""
    loaded = repository.get_scenario_with_property(scenario_id)
    if loaded is None:
        raise HTTPException(status_code=404, detail="Scenario not found")

    scenario, prop = loaded
    result = analyze(scenario, prop, assumptions, include_schedule=True)
    if not result.schedule:
        raise HTTPException(
            status_code=400,
            detail=f"Exit strategy '{result.exit_strategy.value}' carries no mortgage",
        )

    principal = result.schedule[0].principal_paid + result.schedule[0].remaining_balance

    return ScheduleResponse(
        scenario_id=scenario_id,
        summary=summarize_schedule(principal, result.schedule),
        schedule=[AmortizationRow(**row) for row in schedule_to_rows(result.schedule)],
    )
