"""
Analysis Engine Errors

Every error carries a machine-readable kind and the offending field names so
callers can tell bad inputs apart without parsing messages.
"""

import enum
from typing import Any, Dict, Iterable, Optional


class ErrorKind(str, enum.Enum):
    """Categories of analysis failure."""

    invalid_input = "invalid_input"
    strategy_mismatch = "strategy_mismatch"
    unbounded_input = "unbounded_input"


class AnalysisError(ValueError):
    """Base class for errors raised by the analysis engine."""

    kind: ErrorKind = ErrorKind.invalid_input

    def __init__(self, message: str, fields: Iterable[str] = ()):
        super().__init__(message)
        self.message = message
        self.fields = tuple(fields)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.kind.value,
            "message": self.message,
            "fields": list(self.fields),
        }


class InvalidInputError(AnalysisError):
    """A numeric input is missing, negative, zero, or an out-of-range percentage."""

    kind = ErrorKind.invalid_input


class StrategyMismatchError(AnalysisError):
    """The scenario's strategy-specific inputs do not match its exit strategy."""

    kind = ErrorKind.strategy_mismatch


class UnboundedInputError(AnalysisError):
    """An input exceeds the engine's upper bound (e.g. hold time in months)."""

    kind = ErrorKind.unbounded_input


class ScenarioComparisonError(AnalysisError):
    """One scenario in a comparison failed analysis."""

    def __init__(
        self,
        cause: AnalysisError,
        scenario_id: Optional[str] = None,
        scenario_name: Optional[str] = None,
    ):
        label = scenario_name or scenario_id or "<unnamed>"
        super().__init__(f"Scenario '{label}' failed analysis: {cause.message}", cause.fields)
        self.kind = cause.kind
        self.cause = cause
        self.scenario_id = scenario_id
        self.scenario_name = scenario_name

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["scenario_id"] = self.scenario_id
        data["scenario_name"] = self.scenario_name
        return data
