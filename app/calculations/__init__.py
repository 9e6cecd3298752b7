"""
Deal Analysis Engine

Pure calculation modules for real estate deal analysis: mortgage amortization,
per-strategy metrics, scenario analysis and comparison.
"""

from app.calculations import (
    amortization,
    analyzer,
    comparator,
    irr,
    renovation,
    sensitivity,
    strategies,
)

__all__ = [
    "amortization",
    "analyzer",
    "comparator",
    "irr",
    "renovation",
    "sensitivity",
    "strategies",
]
