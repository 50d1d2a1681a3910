"""
Artifact: planner_service/study_planner/api/v1/routes/health.py
Purpose: Defines health-check route handlers for versioned API and shared health logic.
Author: Study Planner Team
Created: 2026-10-19
Preconditions:
- FastAPI routing context is initialized.
Returns:
- Dictionary with `ok: true`.
"""

from fastapi import APIRouter

from ....core.logging import get_logger

logger = get_logger("studyplanner.main")
router = APIRouter(tags=["health"])


def get_health_status(route_path: str) -> dict:
    """Shared health-check handler body used by v1 and legacy routes."""
    logger.debug("GET %s", route_path)
    return {"ok": True}


@router.get("/health")
def health_v1():
    return get_health_status("/api/v1/health")
