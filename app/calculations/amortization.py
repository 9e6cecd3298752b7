"""
Loan Amortization Calculations

Implements fixed-rate mortgage payment and amortization schedule calculations.
Rates are annual percentages (e.g., 6.0 for 6%), matching how scenarios store them.
"""

from typing import List, Dict

from app.calculations.models import AmortizationPeriod
from app.calculations.validation import (
    require_months,
    require_percent,
    require_positive,
)

MAX_TERM_MONTHS = 1200


def monthly_rate_from_percent(annual_rate_percent: float) -> float:
    """Convert an annual percentage rate to a decimal monthly rate."""
    return annual_rate_percent / 100 / 12


def calculate_payment(
    principal: float, annual_rate_percent: float, term_months: int
) -> float:
    """
    Calculate the fixed monthly loan payment.

    Standard annuity formula; a zero rate spreads principal evenly.

    Args:
        principal: Loan principal amount
        annual_rate_percent: Annual interest rate as percent (e.g., 6.0 for 6%)
        term_months: Total amortization period in months

    Returns:
        Monthly payment amount (positive number)
    """
    monthly_rate = monthly_rate_from_percent(annual_rate_percent)

    if monthly_rate == 0:
        return principal / term_months

    return principal * monthly_rate / (1 - (1 + monthly_rate) ** -term_months)


def compute_schedule(
    principal: float, annual_rate_percent: float, term_months: int
) -> List[AmortizationPeriod]:
    """
    Generate a full amortization schedule.

    The schedule is rebuilt from scratch on every call. Values are kept at full
    precision; the last period absorbs any floating-point residue so the
    balance ends at exactly zero.

    Args:
        principal: Loan principal amount (> 0)
        annual_rate_percent: Annual interest rate as percent (0-100)
        term_months: Number of monthly payments (1..MAX_TERM_MONTHS)

    Returns:
        List of AmortizationPeriod rows, one per month

    Raises:
        InvalidInputError: On non-positive principal or term, or a rate outside 0-100
        UnboundedInputError: If term_months exceeds MAX_TERM_MONTHS
    """
    principal = require_positive("principal", principal)
    annual_rate_percent = require_percent("annual_rate_percent", annual_rate_percent)
    term_months = require_months("term_months", term_months, MAX_TERM_MONTHS)

    monthly_rate = monthly_rate_from_percent(annual_rate_percent)
    payment = calculate_payment(principal, annual_rate_percent, term_months)

    schedule = []
    balance = principal

    for period in range(1, term_months + 1):
        interest = balance * monthly_rate

        if period == term_months:
            # Final payment clears whatever is left
            principal_pmt = balance
            balance = 0.0
        else:
            principal_pmt = payment - interest
            balance -= principal_pmt

        schedule.append(
            AmortizationPeriod(
                period=period,
                payment=principal_pmt + interest,
                principal_paid=principal_pmt,
                interest_paid=interest,
                remaining_balance=balance,
            )
        )

    return schedule


def remaining_balance_after(
    schedule: List[AmortizationPeriod], payments_completed: int
) -> float:
    """Remaining loan balance after N payments (principal if none made)."""
    if not schedule:
        return 0.0
    if payments_completed <= 0:
        first = schedule[0]
        return first.remaining_balance + first.principal_paid
    index = min(payments_completed, len(schedule)) - 1
    return schedule[index].remaining_balance


def calculate_total_interest(schedule: List[AmortizationPeriod]) -> float:
    """Calculate total interest paid over loan term."""
    return sum(row.interest_paid for row in schedule)


def summarize_schedule(principal: float, schedule: List[AmortizationPeriod]) -> Dict:
    """Headline figures for a mortgage schedule display."""
    total_interest = calculate_total_interest(schedule)
    return {
        "principal": round(principal, 2),
        "monthly_payment": round(schedule[0].payment, 2) if schedule else 0.0,
        "total_interest": round(total_interest, 2),
        "total_paid": round(principal + total_interest, 2),
        "months": len(schedule),
    }


def schedule_to_rows(schedule: List[AmortizationPeriod]) -> List[Dict]:
    """Round schedule rows to cents for display."""
    return [
        {
            "period": row.period,
            "payment": round(row.payment, 2),
            "principal_paid": round(row.principal_paid, 2),
            "interest_paid": round(row.interest_paid, 2),
            "remaining_balance": round(row.remaining_balance, 2),
        }
        for row in schedule
    ]
