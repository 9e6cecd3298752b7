"""
Scenario Analyzer

Validates a deal scenario, dispatches it to the calculator for its exit
strategy and assembles the metrics persisted back onto the scenario.
"""

import logging
import math
from typing import Dict, Optional

from app.calculations import irr
from app.calculations.exceptions import StrategyMismatchError
from app.calculations.models import (
    AnalysisAssumptions,
    AnalysisResult,
    DealScenario,
    ExitStrategy,
    PropertySnapshot,
    StrategyMetrics,
    StrategyTerms,
)
from app.calculations.strategies import (
    FlipCalculator,
    RentalCalculator,
    ShortTermRentalCalculator,
    StrategyCalculator,
)
from app.calculations.validation import (
    require_months,
    require_non_negative,
    require_percent,
    require_positive,
)

logger = logging.getLogger(__name__)

CURRENCY_PLACES = 2
PERCENT_PLACES = 1
MONTHS_PLACES = 1
MULTIPLE_PLACES = 2

CALCULATORS: Dict[ExitStrategy, StrategyCalculator] = {
    calculator.strategy: calculator
    for calculator in (RentalCalculator(), ShortTermRentalCalculator(), FlipCalculator())
}

_unhandled = set(ExitStrategy) - set(CALCULATORS)
if _unhandled:
    raise RuntimeError(
        f"No calculator registered for: {sorted(s.value for s in _unhandled)}"
    )


def get_calculator(strategy) -> StrategyCalculator:
    """Look up the calculator for an exit strategy."""
    try:
        return CALCULATORS[ExitStrategy(strategy)]
    except ValueError:
        raise StrategyMismatchError(
            f"Unknown exit strategy '{strategy}'", ["exit_strategy"]
        ) from None


def validate_shared_inputs(scenario: DealScenario, assumptions: AnalysisAssumptions) -> None:
    """Check the inputs every strategy depends on."""
    require_positive("purchase_price", scenario.purchase_price)
    require_non_negative("rehab_cost", scenario.rehab_cost)
    require_non_negative("holding_costs", scenario.holding_costs)
    require_non_negative("closing_costs", scenario.closing_costs)
    require_percent("interest_rate", scenario.interest_rate)
    require_months("hold_time_months", scenario.hold_time_months, assumptions.max_hold_months)
    require_percent("discount_rate_percent", assumptions.discount_rate_percent)


def extract_terms(scenario: DealScenario) -> StrategyTerms:
    """
    Build the strategy variant for the scenario's exit strategy.

    Raises StrategyMismatchError listing every required field that is missing
    and every field belonging to another strategy that is populated.
    """
    calculator = get_calculator(scenario.exit_strategy)

    missing = [f for f in calculator.required_fields if getattr(scenario, f) is None]
    if missing:
        raise StrategyMismatchError(
            f"Exit strategy '{calculator.strategy.value}' requires: {', '.join(missing)}",
            missing,
        )

    extraneous = [
        f
        for other in CALCULATORS.values()
        if other is not calculator
        for f in other.required_fields
        if getattr(scenario, f) is not None
    ]
    if extraneous:
        raise StrategyMismatchError(
            f"Fields not used by exit strategy '{calculator.strategy.value}': "
            f"{', '.join(extraneous)}",
            extraneous,
        )

    return calculator.build_terms(scenario)


def _annualized_irr(metrics: StrategyMetrics) -> Optional[float]:
    try:
        monthly = irr.calculate_irr(metrics.cash_flows)
    except ValueError as e:
        logger.debug("IRR unavailable: %s", e)
        return None
    return irr.monthly_to_annual_irr(monthly) * 100


def _break_even(metrics: StrategyMetrics) -> Optional[float]:
    months = irr.calculate_break_even_months(
        metrics.monthly_noi, metrics.total_cash_invested
    )
    return None if math.isinf(months) else round(months, MONTHS_PLACES)


def _npv(metrics: StrategyMetrics, assumptions: AnalysisAssumptions) -> float:
    monthly_rate = assumptions.discount_rate_percent / 100 / 12
    return irr.calculate_npv(metrics.cash_flows, monthly_rate)


def _annualized_return(scenario: DealScenario, metrics: StrategyMetrics) -> Optional[float]:
    """Compound yearly growth of the cash invested over the hold."""
    ending = metrics.total_cash_invested + metrics.total_profit
    if ending < 0:
        return None
    years = scenario.hold_time_months / 12
    return irr.calculate_cagr(metrics.total_cash_invested, ending, years)


def analyze(
    scenario: DealScenario,
    property: PropertySnapshot,
    assumptions: Optional[AnalysisAssumptions] = None,
    include_schedule: bool = False,
) -> AnalysisResult:
    """
    Compute investment metrics for one scenario.

    Pure function of its inputs. Currency figures are rounded to cents and
    percentages to one decimal, once, after all computation.

    Args:
        scenario: Deal scenario snapshot
        property: Parent property snapshot
        assumptions: Financing and expense assumptions (defaults if omitted)
        include_schedule: Attach the full-precision mortgage schedule

    Raises:
        InvalidInputError, StrategyMismatchError, UnboundedInputError
    """
    if assumptions is None:
        assumptions = AnalysisAssumptions()

    validate_shared_inputs(scenario, assumptions)
    terms = extract_terms(scenario)
    calculator = CALCULATORS[ExitStrategy(scenario.exit_strategy)]

    metrics = calculator.calculate(scenario, terms, property, assumptions)

    logger.debug(
        "Analyzed scenario %s (%s): roi=%.4f profit=%.2f",
        scenario.id or scenario.name,
        calculator.strategy.value,
        metrics.roi,
        metrics.total_profit,
    )

    annual_irr = _annualized_irr(metrics)
    annualized_return = _annualized_return(scenario, metrics)

    return AnalysisResult(
        exit_strategy=calculator.strategy,
        cap_rate=round(metrics.cap_rate, PERCENT_PLACES),
        cash_on_cash=round(metrics.cash_on_cash, PERCENT_PLACES),
        roi=round(metrics.roi, PERCENT_PLACES),
        monthly_noi=round(metrics.monthly_noi, CURRENCY_PLACES),
        total_profit=round(metrics.total_profit, CURRENCY_PLACES),
        total_cash_invested=round(metrics.total_cash_invested, CURRENCY_PLACES),
        monthly_debt_service=round(metrics.monthly_debt_service, CURRENCY_PLACES),
        irr=round(annual_irr, PERCENT_PLACES) if annual_irr is not None else None,
        npv=round(_npv(metrics, assumptions), CURRENCY_PLACES),
        equity_multiple=round(irr.calculate_multiple(metrics.cash_flows), MULTIPLE_PLACES),
        annualized_return=(
            round(annualized_return, PERCENT_PLACES)
            if annualized_return is not None
            else None
        ),
        break_even_months=_break_even(metrics),
        schedule=list(metrics.schedule) if include_schedule else None,
    )
