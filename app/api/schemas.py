"""
Response schemas shared by the analysis and scenario endpoints.
"""

from typing import List, Optional

from pydantic import BaseModel

from app.calculations.amortization import schedule_to_rows
from app.calculations.models import AnalysisResult, ExitStrategy


class AmortizationRow(BaseModel):
    """One month of a mortgage schedule."""

    period: int
    payment: float
    principal_paid: float
    interest_paid: float
    remaining_balance: float


class AnalysisResponse(BaseModel):
    """Computed metrics for a scenario."""

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
    schedule: Optional[List[AmortizationRow]] = None


def result_to_response(result: AnalysisResult) -> AnalysisResponse:
    """Convert an engine result to its API shape."""
    return AnalysisResponse(
        exit_strategy=result.exit_strategy,
        cap_rate=result.cap_rate,
        cash_on_cash=result.cash_on_cash,
        roi=result.roi,
        monthly_noi=result.monthly_noi,
        total_profit=result.total_profit,
        total_cash_invested=result.total_cash_invested,
        monthly_debt_service=result.monthly_debt_service,
        irr=result.irr,
        npv=result.npv,
        equity_multiple=result.equity_multiple,
        annualized_return=result.annualized_return,
        break_even_months=result.break_even_months,
        schedule=(
            [AmortizationRow(**row) for row in schedule_to_rows(result.schedule)]
            if result.schedule is not None
            else None
        ),
    )
