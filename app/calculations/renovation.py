"""
Renovation Budget Summary

Aggregates renovation line items into the budget figures shown on the
renovation tracker. The estimated total is the rehab cost a new deal scenario
is seeded with.
"""

import enum
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from app.calculations.validation import require_non_negative, require_positive


class RenovationStatus(str, enum.Enum):
    pending = "pending"
    in_progress = "in_progress"
    completed = "completed"


@dataclass(frozen=True)
class RenovationLine:
    """One renovation cost entry."""

    category: str
    estimated_cost: float
    status: RenovationStatus = RenovationStatus.pending
    actual_cost: Optional[float] = None


def summarize_budget(items: Iterable[RenovationLine]) -> Dict:
    """
    Summarize renovation spend.

    Variance compares actual spend against the estimate for items that have an
    actual cost recorded; positive variance means over budget.
    """
    items = list(items)

    by_status = {status.value: 0 for status in RenovationStatus}
    by_category: Dict[str, Dict[str, float]] = {}
    estimated_total = 0.0
    actual_total = 0.0
    variance = 0.0

    for item in items:
        estimated = require_positive("estimated_cost", item.estimated_cost)
        actual = (
            require_non_negative("actual_cost", item.actual_cost)
            if item.actual_cost is not None
            else None
        )

        by_status[RenovationStatus(item.status).value] += 1
        category = by_category.setdefault(item.category, {"estimated": 0.0, "actual": 0.0})
        category["estimated"] += estimated
        estimated_total += estimated

        if actual is not None:
            category["actual"] += actual
            actual_total += actual
            variance += actual - estimated

    completed = by_status[RenovationStatus.completed.value]

    return {
        "total": len(items),
        "by_status": by_status,
        "estimated_total": round(estimated_total, 2),
        "actual_total": round(actual_total, 2),
        "variance": round(variance, 2),
        "percent_complete": round(completed / len(items) * 100, 1) if items else 0.0,
        "by_category": {
            name: {key: round(value, 2) for key, value in totals.items()}
            for name, totals in sorted(by_category.items())
        },
    }
