"""
Artifact: planner_service/study_planner/api/v1/router.py
Purpose: Aggregates v1 API route modules for single include in app startup.
Author: Study Planner Team
Created: 2026-10-19
Preconditions:
- Route modules under api/v1/routes are importable.
Postconditions:
- Exposes a composed APIRouter containing health, plan, and document routes.
Returns:
- `APIRouter` instance.
"""

from fastapi import APIRouter

from .routes.documents import router as documents_router
from .routes.health import router as health_router
from .routes.plans import router as plans_router

api_v1_router = APIRouter()
api_v1_router.include_router(health_router)
api_v1_router.include_router(plans_router)
api_v1_router.include_router(documents_router)
