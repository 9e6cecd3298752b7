"""
API routes for the portfolio manager.
"""

from fastapi import APIRouter

from app.api import analysis, properties, renovations, scenarios

router = APIRouter()

# Include sub-routers
router.include_router(properties.router, prefix="/properties", tags=["properties"])
router.include_router(renovations.router, prefix="/properties", tags=["renovations"])
router.include_router(scenarios.router, prefix="/scenarios", tags=["scenarios"])
router.include_router(analysis.router, prefix="/analysis", tags=["analysis"])
