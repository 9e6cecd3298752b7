"""
Input checks shared by the calculators.

Each helper raises before any computation happens and names the field it
rejected.
"""

import math
from typing import Optional

from app.calculations.exceptions import InvalidInputError, UnboundedInputError


def _require_number(field: str, value: Optional[float]) -> float:
    if value is None:
        raise InvalidInputError(f"{field} is required", [field])
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(f"{field} must be a number", [field])
    if not math.isfinite(value):
        raise InvalidInputError(f"{field} must be finite", [field])
    return float(value)


def require_positive(field: str, value: Optional[float]) -> float:
    number = _require_number(field, value)
    if number <= 0:
        raise InvalidInputError(f"{field} must be positive", [field])
    return number


def require_non_negative(field: str, value: Optional[float]) -> float:
    number = _require_number(field, value)
    if number < 0:
        raise InvalidInputError(f"{field} must be non-negative", [field])
    return number


def require_percent(field: str, value: Optional[float]) -> float:
    """Percentages are stored as 0-100."""
    number = require_non_negative(field, value)
    if number > 100:
        raise InvalidInputError(f"{field} must not exceed 100", [field])
    return number


def require_months(field: str, value: Optional[int], max_months: int) -> int:
    """Positive whole number of months, capped at max_months."""
    number = _require_number(field, value)
    if number != int(number):
        raise InvalidInputError(f"{field} must be a whole number of months", [field])
    if number <= 0:
        raise InvalidInputError(f"{field} must be positive", [field])
    if number > max_months:
        raise UnboundedInputError(
            f"{field} must not exceed {max_months} months", [field]
        )
    return int(number)
