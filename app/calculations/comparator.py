"""
Scenario Comparator

Analyzes several scenarios for one property and ranks them.
"""

from datetime import timezone
from typing import Dict, List, Optional, Sequence, Tuple

from app.calculations.analyzer import analyze
from app.calculations.exceptions import (
    AnalysisError,
    InvalidInputError,
    ScenarioComparisonError,
)
from app.calculations.models import (
    AnalysisAssumptions,
    AnalysisResult,
    DealScenario,
    PropertySnapshot,
    RankedScenario,
)

RANKABLE_METRICS = ("roi", "cap_rate", "cash_on_cash", "monthly_noi", "total_profit", "irr")
DEFAULT_METRIC = "roi"


def _metric_value(result: AnalysisResult, metric: str) -> float:
    value = getattr(result, metric)
    # Scenarios without a computable IRR sort last
    return float("-inf") if value is None else value


def _created_order(scenario: DealScenario) -> Tuple[bool, float]:
    # Undated scenarios sort after dated ones; naive datetimes are taken as UTC
    created_at = scenario.created_at
    if created_at is None:
        return (True, 0.0)
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return (False, created_at.timestamp())


def _ranking_key(scenario: DealScenario, result: AnalysisResult, metric: str):
    return (
        -_metric_value(result, metric),
        -result.total_profit,
        _created_order(scenario),
        scenario.id or "",
    )


def compare(
    scenarios: Sequence[DealScenario],
    property: PropertySnapshot,
    metric: str = DEFAULT_METRIC,
    assumptions: Optional[AnalysisAssumptions] = None,
) -> List[RankedScenario]:
    """
    Rank scenarios by a metric, best first.

    Ties are broken by total profit (descending), then by creation order, so
    the ranking does not depend on the order scenarios are passed in.

    Raises:
        InvalidInputError: If metric is not rankable
        ScenarioComparisonError: If any scenario fails analysis
    """
    if metric not in RANKABLE_METRICS:
        raise InvalidInputError(
            f"Cannot rank by '{metric}'; choose one of {', '.join(RANKABLE_METRICS)}",
            ["metric"],
        )

    analyzed = []
    for scenario in scenarios:
        try:
            result = analyze(scenario, property, assumptions)
        except AnalysisError as e:
            raise ScenarioComparisonError(e, scenario.id, scenario.name) from e
        analyzed.append((scenario, result))

    analyzed.sort(key=lambda pair: _ranking_key(pair[0], pair[1], metric))

    return [
        RankedScenario(scenario=scenario, result=result, rank=position)
        for position, (scenario, result) in enumerate(analyzed, start=1)
    ]


def best_by(ranked: Sequence[RankedScenario]) -> Dict[str, Optional[RankedScenario]]:
    """Top scenario for each headline metric."""
    summary = {}
    for metric in ("roi", "cap_rate", "total_profit"):
        if not ranked:
            summary[metric] = None
            continue
        summary[metric] = min(
            ranked, key=lambda r: _ranking_key(r.scenario, r.result, metric)
        )
    return summary
