"""
Sensitivity Analysis

Flexes the key assumptions of a scenario up and down by a fixed percentage and
reports how a chosen metric responds. Variables are ordered by the size of the
swing, most sensitive first (tornado ordering).
"""

from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Tuple

from app.calculations.analyzer import analyze
from app.calculations.exceptions import InvalidInputError
from app.calculations.models import (
    AnalysisAssumptions,
    DealScenario,
    ExitStrategy,
    PropertySnapshot,
)
from app.calculations.validation import require_positive

# Revenue driver flexed for each strategy, alongside the cost inputs
REVENUE_DRIVERS: Dict[ExitStrategy, str] = {
    ExitStrategy.rent: "monthly_rent",
    ExitStrategy.airbnb: "daily_rate",
    ExitStrategy.flip: "sale_price",
}
COST_VARIABLES: Tuple[str, ...] = ("purchase_price", "rehab_cost")
SENSITIVITY_METRICS = ("roi", "cap_rate", "cash_on_cash", "monthly_noi", "total_profit")


@dataclass(frozen=True)
class SensitivityResult:
    """Metric response to one variable moving down and up."""

    variable: str
    base_value: float
    low_value: float
    high_value: float
    metric_at_low: float
    metric_at_high: float

    @property
    def swing(self) -> float:
        return abs(self.metric_at_high - self.metric_at_low)


@dataclass(frozen=True)
class SensitivityAnalysis:
    metric: str
    variation_percent: float
    base_metric: float
    variables: List[SensitivityResult] = field(default_factory=list)


def _metric(scenario, property, assumptions, metric) -> float:
    return getattr(analyze(scenario, property, assumptions), metric)


def run_sensitivity(
    scenario: DealScenario,
    property: PropertySnapshot,
    metric: str = "total_profit",
    variation_percent: float = 10.0,
    assumptions: Optional[AnalysisAssumptions] = None,
) -> SensitivityAnalysis:
    """
    Flex purchase price, rehab cost and the strategy's revenue driver.

    Args:
        scenario: Scenario to test
        property: Parent property snapshot
        metric: Result field to observe (see SENSITIVITY_METRICS)
        variation_percent: Relative change applied each way (0 < x < 100)
        assumptions: Financing and expense assumptions

    Raises:
        InvalidInputError: On an unknown metric or bad variation
        plus any error analyze() raises for the base scenario
    """
    if metric not in SENSITIVITY_METRICS:
        raise InvalidInputError(f"Unknown metric '{metric}'", ["metric"])
    variation_percent = require_positive("variation_percent", variation_percent)
    if variation_percent >= 100:
        raise InvalidInputError("variation_percent must be below 100", ["variation_percent"])

    base_metric = _metric(scenario, property, assumptions, metric)
    variation = variation_percent / 100

    variables = COST_VARIABLES + (REVENUE_DRIVERS[ExitStrategy(scenario.exit_strategy)],)

    results = []
    for name in variables:
        base_value = getattr(scenario, name)
        low_value = base_value * (1 - variation)
        high_value = base_value * (1 + variation)
        results.append(
            SensitivityResult(
                variable=name,
                base_value=base_value,
                low_value=low_value,
                high_value=high_value,
                metric_at_low=_metric(
                    replace(scenario, **{name: low_value}), property, assumptions, metric
                ),
                metric_at_high=_metric(
                    replace(scenario, **{name: high_value}), property, assumptions, metric
                ),
            )
        )

    results.sort(key=lambda r: r.swing, reverse=True)

    return SensitivityAnalysis(
        metric=metric,
        variation_percent=variation_percent,
        base_metric=base_metric,
        variables=results,
    )
