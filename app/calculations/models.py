"""
Data records consumed and produced by the analysis engine.

All inputs are frozen snapshots; the engine never mutates them.
"""

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Union


class ExitStrategy(str, enum.Enum):
    """Investment disposition plan."""

    rent = "rent"
    airbnb = "airbnb"
    flip = "flip"


class PropertyStatus(str, enum.Enum):
    """Pipeline status of a property."""

    lead = "lead"
    analyzing = "analyzing"
    offer = "offer"
    under_contract = "under_contract"
    owned = "owned"
    sold = "sold"


@dataclass(frozen=True)
class PropertySnapshot:
    """Property baseline as read from the persistence layer."""

    purchase_price: Optional[float] = None
    current_value: Optional[float] = None
    arv: Optional[float] = None  # After-repair value
    id: Optional[str] = None
    address: Optional[str] = None
    sqft: Optional[float] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[float] = None
    year_built: Optional[int] = None
    lot_size: Optional[float] = None
    type: ExitStrategy = ExitStrategy.rent
    status: PropertyStatus = PropertyStatus.lead


@dataclass(frozen=True)
class DealScenario:
    """A named what-if analysis tied to one property."""

    purchase_price: float
    rehab_cost: float
    holding_costs: float
    closing_costs: float
    interest_rate: float  # Annual percent, 0-100
    hold_time_months: int
    exit_strategy: ExitStrategy

    # Strategy-specific inputs; only the set matching exit_strategy is populated
    monthly_rent: Optional[float] = None
    occupancy_rate: Optional[float] = None  # Percent, 0-100
    daily_rate: Optional[float] = None
    average_occupancy: Optional[float] = None  # Percent, 0-100
    sale_price: Optional[float] = None
    selling_costs: Optional[float] = None

    id: Optional[str] = None
    name: Optional[str] = None
    property_id: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class RentalTerms:
    """Long-term rental inputs."""

    monthly_rent: float
    occupancy_rate: float


@dataclass(frozen=True)
class ShortTermRentalTerms:
    """Short-term (Airbnb) rental inputs."""

    daily_rate: float
    average_occupancy: float


@dataclass(frozen=True)
class FlipTerms:
    """Buy-renovate-sell inputs."""

    sale_price: float
    selling_costs: float


StrategyTerms = Union[RentalTerms, ShortTermRentalTerms, FlipTerms]


@dataclass(frozen=True)
class AnalysisAssumptions:
    """
    Named assumptions behind NOI and financing.

    Percentages are 0-100. monthly_operating_expenses, when set, replaces the
    default expense allocation of holding_costs / hold_time_months.
    """

    loan_to_value_percent: float = 75.0
    loan_term_months: int = 360
    monthly_operating_expenses: Optional[float] = None
    management_fee_percent: float = 0.0
    vacancy_reserve_percent: float = 0.0
    maintenance_reserve_percent: float = 0.0
    platform_fee_percent: float = 0.0
    days_per_month: float = 30.4
    max_hold_months: int = 1200
    discount_rate_percent: float = 10.0

    @classmethod
    def from_settings(cls, settings) -> "AnalysisAssumptions":
        return cls(
            loan_to_value_percent=settings.loan_to_value_percent,
            loan_term_months=settings.loan_term_months,
            management_fee_percent=settings.management_fee_percent,
            vacancy_reserve_percent=settings.vacancy_reserve_percent,
            maintenance_reserve_percent=settings.maintenance_reserve_percent,
            platform_fee_percent=settings.platform_fee_percent,
            days_per_month=settings.days_per_month,
            max_hold_months=settings.max_hold_months,
            discount_rate_percent=settings.discount_rate_percent,
        )


@dataclass(frozen=True)
class AmortizationPeriod:
    """One monthly row of a mortgage schedule."""

    period: int
    payment: float
    principal_paid: float
    interest_paid: float
    remaining_balance: float


@dataclass(frozen=True)
class StrategyMetrics:
    """Unrounded output of a strategy calculator."""

    monthly_noi: float
    cap_rate: float
    cash_on_cash: float
    roi: float
    total_profit: float
    total_cash_invested: float
    monthly_debt_service: float = 0.0
    cash_flows: List[float] = field(default_factory=list)
    schedule: List[AmortizationPeriod] = field(default_factory=list)


@dataclass(frozen=True)
class AnalysisResult:
    """Metrics written back onto a deal scenario."""

    exit_strategy: ExitStrategy
    cap_rate: float
    cash_on_cash: float
    roi: float
    monthly_noi: float
    total_profit: float
    total_cash_invested: float
    monthly_debt_service: float
    irr: Optional[float] = None
    npv: Optional[float] = None
    equity_multiple: Optional[float] = None
    annualized_return: Optional[float] = None
    break_even_months: Optional[float] = None
    schedule: Optional[List[AmortizationPeriod]] = None

    def to_metrics(self) -> Dict[str, Optional[float]]:
        """The metrics persisted on the scenario."""
        return {
            "cap_rate": self.cap_rate,
            "cash_on_cash": self.cash_on_cash,
            "roi": self.roi,
            "monthly_noi": self.monthly_noi,
            "total_profit": self.total_profit,
            "irr": self.irr,
            "npv": self.npv,
        }


@dataclass(frozen=True)
class RankedScenario:
    """A scenario's position in a comparison."""

    scenario: DealScenario
    result: AnalysisResult
    rank: int
