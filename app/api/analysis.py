"""
Deal analysis API endpoints.

Stateless calculators (inline analysis, mortgage schedule) plus comparison and
sensitivity runs over stored scenarios.
"""

from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from app.api.dependencies import get_assumptions
from app.api.schemas import AmortizationRow, AnalysisResponse, result_to_response
from app.calculations.amortization import (
    compute_schedule,
    schedule_to_rows,
    summarize_schedule,
)
from app.calculations.analyzer import analyze
from app.calculations.comparator import DEFAULT_METRIC, best_by, compare
from app.calculations.models import (
    AnalysisAssumptions,
    DealScenario,
    ExitStrategy,
    PropertySnapshot,
    RankedScenario,
)
from app.calculations.sensitivity import run_sensitivity
from app.config import Settings, get_settings
from app.db.database import get_repository
from app.db.repository import ScenarioRepository

router = APIRouter()


class PropertyInput(BaseModel):
    """Property baseline for inline analysis."""

    purchase_price: Optional[float] = None
    current_value: Optional[float] = None
    arv: Optional[float] = None


class ScenarioInput(BaseModel):
    """Deal scenario for inline analysis."""

    name: Optional[str] = None
    purchase_price: float
    rehab_cost: float = 0.0
    holding_costs: float = 0.0
    closing_costs: float = 0.0
    interest_rate: float = 0.0
    hold_time_months: int
    exit_strategy: ExitStrategy
    monthly_rent: Optional[float] = None
    occupancy_rate: Optional[float] = None
    daily_rate: Optional[float] = None
    average_occupancy: Optional[float] = None
    sale_price: Optional[float] = None
    selling_costs: Optional[float] = None


class InlineAnalysisInput(BaseModel):
    scenario: ScenarioInput
    property: PropertyInput = PropertyInput()
    include_schedule: bool = False


class CompareInput(BaseModel):
    """Compare stored scenarios of one property."""

    property_id: str
    scenario_ids: Optional[List[str]] = None
    metric: Optional[str] = None


class ComparisonEntry(BaseModel):
    rank: int
    scenario_id: Optional[str]
    name: Optional[str]
    analysis: AnalysisResponse


class CompareResponse(BaseModel):
    metric: str
    comparisons: List[ComparisonEntry]
    best: Dict[str, Optional[str]]


class MortgageInput(BaseModel):
    """Input for a mortgage schedule."""

    principal: float
    annual_rate: float  # Percent
    months: int


class MortgageResponse(BaseModel):
    summary: dict
    schedule: List[AmortizationRow]


class SensitivityInput(BaseModel):
    scenario_id: str
    metric: str = "total_profit"
    variation_percent: Optional[float] = None


def _to_entry(ranked: RankedScenario) -> ComparisonEntry:
    return ComparisonEntry(
        rank=ranked.rank,
        scenario_id=ranked.scenario.id,
        name=ranked.scenario.name,
        analysis=result_to_response(ranked.result),
    )


@router.post("/analyze", response_model=AnalysisResponse)
async def analyze_inline(
    inputs: InlineAnalysisInput,
    assumptions: AnalysisAssumptions = Depends(get_assumptions),
):
    """Analyze a scenario that is not stored."""
    result = analyze(
        DealScenario(**inputs.scenario.model_dump()),
        PropertySnapshot(**inputs.property.model_dump()),
        assumptions,
        include_schedule=inputs.include_schedule,
    )
    return result_to_response(result)


@router.post("/compare", response_model=CompareResponse)
async def compare_scenarios(
    inputs: CompareInput,
    repository: ScenarioRepository = Depends(get_repository),
    assumptions: AnalysisAssumptions = Depends(get_assumptions),
    settings: Settings = Depends(get_settings),
):
    """Rank a property's scenarios by a metric (default ROI)."""
    prop = repository.get_property(inputs.property_id)
    if prop is None:
        raise HTTPException(status_code=404, detail="Property not found")

    scenarios = repository.list_scenarios(inputs.property_id, inputs.scenario_ids)
    if inputs.scenario_ids:
        missing = set(inputs.scenario_ids) - {s.id for s in scenarios}
        if missing:
            raise HTTPException(
                status_code=404,
                detail=f"Scenarios not found: {', '.join(sorted(missing))}",
            )

    metric = inputs.metric or settings.default_rank_metric or DEFAULT_METRIC
    ranked = compare(scenarios, prop, metric=metric, assumptions=assumptions)

    return CompareResponse(
        metric=metric,
        comparisons=[_to_entry(r) for r in ranked],
        best={
            name: (top.scenario.id if top else None)
            for name, top in best_by(ranked).items()
        },
    )


@router.post("/mortgage-schedule", response_model=MortgageResponse)
async def mortgage_schedule(inputs: MortgageInput):
    """Generate a fixed-rate mortgage schedule."""
    schedule = compute_schedule(inputs.principal, inputs.annual_rate, inputs.months)

    return MortgageResponse(
        summary=summarize_schedule(inputs.principal, schedule),
        schedule=[AmortizationRow(**row) for row in schedule_to_rows(schedule)],
    )


@router.post("/sensitivity")
async def sensitivity(
    inputs: SensitivityInput,
    repository: ScenarioRepository = Depends(get_repository),
    assumptions: AnalysisAssumptions = Depends(get_assumptions),
    settings: Settings = Depends(get_settings),
):
    """Tornado-ordered sensitivity of a stored scenario."""
    loaded = repository.get_scenario_with_property(inputs.scenario_id)
    if loaded is None:
        raise HTTPException(status_code=404, detail="Scenario not found")

    scenario, prop = loaded
    variation = (
        inputs.variation_percent
        if inputs.variation_percent is not None
        else settings.sensitivity_variation_percent
    )
    analysis = run_sensitivity(
        scenario,
        prop,
        metric=inputs.metric,
        variation_percent=variation,
        assumptions=assumptions,
    )

    return {
        "scenario_id": inputs.scenario_id,
        "metric": analysis.metric,
        "variation_percent": analysis.variation_percent,
        "base": analysis.base_metric,
        "variables": [
            {
                "variable": v.variable,
                "base_value": round(v.base_value, 2),
                "low_value": round(v.low_value, 2),
                "high_value": round(v.high_value, 2),
                "metric_at_low": v.metric_at_low,
                "metric_at_high": v.metric_at_high,
                "swing": round(v.swing, 2),
            }
            for v in analysis.variables
        ],
    }
