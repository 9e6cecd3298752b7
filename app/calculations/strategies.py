"""
Exit Strategy Calculators

One calculator per exit strategy. Each turns a scenario's shared costs plus its
strategy-specific terms into NOI, cap rate, cash-on-cash, ROI and total profit.
All values are returned at full precision; rounding happens in the analyzer.
"""

import math
from dataclasses import dataclass, field
from typing import List, Tuple

from app.calculations.amortization import (
    MAX_TERM_MONTHS,
    compute_schedule,
    remaining_balance_after,
)
from app.calculations.exceptions import UnboundedInputError
from app.calculations.models import (
    AmortizationPeriod,
    AnalysisAssumptions,
    DealScenario,
    ExitStrategy,
    FlipTerms,
    PropertySnapshot,
    RentalTerms,
    ShortTermRentalTerms,
    StrategyMetrics,
    StrategyTerms,
)
from app.calculations.validation import (
    require_months,
    require_non_negative,
    require_percent,
    require_positive,
)


@dataclass(frozen=True)
class SharedQuantities:
    """Figures every strategy derives from the shared scenario inputs."""

    total_cash_invested: float
    loan_amount: float = 0.0
    monthly_debt_service: float = 0.0
    schedule: List[AmortizationPeriod] = field(default_factory=list)


def calculate_total_cash_invested(scenario: DealScenario) -> float:
    """Purchase price plus rehab, holding and closing costs."""
    total = (
        scenario.purchase_price
        + scenario.rehab_cost
        + scenario.holding_costs
        + scenario.closing_costs
    )
    if not math.isfinite(total):
        raise UnboundedInputError(
            "Total cash invested exceeds the representable range",
            ["total_cash_invested"],
        )
    return total


def derive_shared_quantities(
    scenario: DealScenario,
    assumptions: AnalysisAssumptions,
    financed: bool = True,
) -> SharedQuantities:
    """
    Derive cash invested and, for held assets, the mortgage and its payment.

    The loan is sized as loan_to_value_percent of the purchase price and
    amortized over loan_term_months at the scenario's interest rate.
    """
    total_cash_invested = calculate_total_cash_invested(scenario)

    if not financed:
        return SharedQuantities(total_cash_invested=total_cash_invested)

    ltv = require_percent("loan_to_value_percent", assumptions.loan_to_value_percent)
    loan_amount = scenario.purchase_price * ltv / 100
    if loan_amount <= 0:
        return SharedQuantities(total_cash_invested=total_cash_invested)

    term = require_months("loan_term_months", assumptions.loan_term_months, MAX_TERM_MONTHS)
    schedule = compute_schedule(loan_amount, scenario.interest_rate, term)

    return SharedQuantities(
        total_cash_invested=total_cash_invested,
        loan_amount=loan_amount,
        monthly_debt_service=schedule[0].payment,
        schedule=schedule,
    )


def property_value(property: PropertySnapshot, scenario: DealScenario) -> float:
    """Current market value, falling back to the scenario's purchase price."""
    if property.current_value is None:
        return scenario.purchase_price
    return require_positive("current_value", property.current_value)


class StrategyCalculator:
    """Base class for exit strategy calculators."""

    strategy: ExitStrategy
    required_fields: Tuple[str, ...] = ()

    def build_terms(self, scenario: DealScenario) -> StrategyTerms:
        raise NotImplementedError

    def calculate(
        self,
        scenario: DealScenario,
        terms: StrategyTerms,
        property: PropertySnapshot,
        assumptions: AnalysisAssumptions,
    ) -> StrategyMetrics:
        raise NotImplementedError


class RentalCalculator(StrategyCalculator):
    """Long-term rental held for income."""

    strategy = ExitStrategy.rent
    required_fields = ("monthly_rent", "occupancy_rate")

    def build_terms(self, scenario: DealScenario) -> RentalTerms:
        return RentalTerms(
            monthly_rent=require_positive("monthly_rent", scenario.monthly_rent),
            occupancy_rate=require_percent("occupancy_rate", scenario.occupancy_rate),
        )

    def gross_monthly_income(self, terms, assumptions: AnalysisAssumptions) -> float:
        return terms.monthly_rent * (terms.occupancy_rate / 100)

    def expense_percent(self, assumptions: AnalysisAssumptions) -> float:
        """Operating reserves charged as a share of gross income."""
        return (
            require_percent("management_fee_percent", assumptions.management_fee_percent)
            + require_percent("vacancy_reserve_percent", assumptions.vacancy_reserve_percent)
            + require_percent(
                "maintenance_reserve_percent", assumptions.maintenance_reserve_percent
            )
        )

    def monthly_operating_expenses(
        self,
        scenario: DealScenario,
        gross_income: float,
        assumptions: AnalysisAssumptions,
    ) -> float:
        if assumptions.monthly_operating_expenses is not None:
            base = require_non_negative(
                "monthly_operating_expenses", assumptions.monthly_operating_expenses
            )
        else:
            base = scenario.holding_costs / scenario.hold_time_months
        return base + gross_income * self.expense_percent(assumptions) / 100

    def calculate(
        self,
        scenario: DealScenario,
        terms: StrategyTerms,
        property: PropertySnapshot,
        assumptions: AnalysisAssumptions,
    ) -> StrategyMetrics:
        shared = derive_shared_quantities(scenario, assumptions, financed=True)
        value = property_value(property, scenario)
        hold = scenario.hold_time_months

        gross = self.gross_monthly_income(terms, assumptions)
        expenses = self.monthly_operating_expenses(scenario, gross, assumptions)
        monthly_noi = gross - shared.monthly_debt_service - expenses
        annual_noi = monthly_noi * 12

        invested = shared.total_cash_invested
        accumulated_noi = monthly_noi * hold
        appreciation = value - scenario.purchase_price
        remaining_loan = remaining_balance_after(shared.schedule, hold)
        exit_equity = value - remaining_loan

        # Month 0 outlay, monthly NOI, equity released at exit
        cash_flows = [-invested] + [monthly_noi] * hold
        cash_flows[-1] += exit_equity

        return StrategyMetrics(
            monthly_noi=monthly_noi,
            cap_rate=annual_noi / value * 100,
            cash_on_cash=annual_noi / invested * 100,
            roi=(appreciation + accumulated_noi) / invested * 100,
            total_profit=exit_equity + accumulated_noi - invested,
            total_cash_invested=invested,
            monthly_debt_service=shared.monthly_debt_service,
            cash_flows=cash_flows,
            schedule=shared.schedule,
        )


class ShortTermRentalCalculator(RentalCalculator):
    """Airbnb-style rental; income from nightly rate and occupancy."""

    strategy = ExitStrategy.airbnb
    required_fields = ("daily_rate", "average_occupancy")

    def build_terms(self, scenario: DealScenario) -> ShortTermRentalTerms:
        return ShortTermRentalTerms(
            daily_rate=require_positive("daily_rate", scenario.daily_rate),
            average_occupancy=require_percent(
                "average_occupancy", scenario.average_occupancy
            ),
        )

    def gross_monthly_income(self, terms, assumptions: AnalysisAssumptions) -> float:
        days = require_positive("days_per_month", assumptions.days_per_month)
        return terms.daily_rate * terms.average_occupancy / 100 * days

    def expense_percent(self, assumptions: AnalysisAssumptions) -> float:
        return super().expense_percent(assumptions) + require_percent(
            "platform_fee_percent", assumptions.platform_fee_percent
        )


class FlipCalculator(StrategyCalculator):
    """Buy, renovate and sell; no holding income."""

    strategy = ExitStrategy.flip
    required_fields = ("sale_price", "selling_costs")

    def build_terms(self, scenario: DealScenario) -> FlipTerms:
        return FlipTerms(
            sale_price=require_positive("sale_price", scenario.sale_price),
            selling_costs=require_non_negative("selling_costs", scenario.selling_costs),
        )

    def financing_cost(self, scenario: DealScenario) -> float:
        """Simple interest on purchase and rehab over the hold."""
        if scenario.interest_rate <= 0:
            return 0.0
        financed = scenario.purchase_price + scenario.rehab_cost
        return financed * scenario.interest_rate / 100 * scenario.hold_time_months / 12

    def calculate(
        self,
        scenario: DealScenario,
        terms: StrategyTerms,
        property: PropertySnapshot,
        assumptions: AnalysisAssumptions,
    ) -> StrategyMetrics:
        shared = derive_shared_quantities(scenario, assumptions, financed=False)
        invested = shared.total_cash_invested

        net_sale = terms.sale_price - terms.selling_costs - self.financing_cost(scenario)
        total_profit = net_sale - invested
        roi = total_profit / invested * 100

        cash_flows = [-invested] + [0.0] * scenario.hold_time_months
        cash_flows[-1] += net_sale

        return StrategyMetrics(
            monthly_noi=0.0,
            cap_rate=0.0,
            cash_on_cash=roi,
            roi=roi,
            total_profit=total_profit,
            total_cash_invested=invested,
            cash_flows=cash_flows,
        )
