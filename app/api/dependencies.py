"""
FastAPI dependencies shared by the API routers.
"""

from fastapi import Depends

from app.calculations.models import AnalysisAssumptions
from app.config import Settings, get_settings


def get_assumptions(settings: Settings = Depends(get_settings)) -> AnalysisAssumptions:
    """Engine assumptions built from the configured defaults."""
    return AnalysisAssumptions.from_settings(settings)
