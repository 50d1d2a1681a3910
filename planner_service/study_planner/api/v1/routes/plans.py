"""
Artifact: planner_service/study_planner/api/v1/routes/plans.py
Purpose: Defines plan generation route handlers and maps workflow failures to HTTP responses.
Author: Study Planner Team
Created: 2026-10-19
Preconditions:
- Incoming request body conforms to PlanRequest schema.
Inputs:
- Acceptable: POST body containing subject and optional topic/prompt/fileContent.
- Unacceptable: Invalid schema payloads or malformed JSON bodies.
Postconditions:
- Executes the generate-plan workflow and returns tasks plus optional analysis.
Returns:
- Dictionary containing `tasks` and, when available, `analysis`.
Errors/Exceptions:
- Raises HTTPException with 400/402/429/500 depending on the failure.
"""

import traceback

from fastapi import APIRouter, HTTPException

from ....core.errors import PlannerError
from ....core.logging import get_logger
from ....schemas.requests import PlanRequest
from ....services.plan_service import generate_plan_workflow

logger = get_logger("studyplanner.main")
router = APIRouter(tags=["plans"])


def handle_generate_plan_request(req: PlanRequest, route_path: str):
    """Shared generate-plan handler body used by v1 and legacy routes."""
    try:
        return generate_plan_workflow(req, route_path=route_path).to_wire()
    except PlannerError as e:
        logger.warning("Plan request failed (%d): %s", e.status_code, e)
        raise HTTPException(status_code=e.status_code, detail=str(e))
    except Exception as e:
        logger.error("Plan error: %s", repr(e))
        logger.debug("Traceback:\n%s", traceback.format_exc())
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/plans")
def create_plan(req: PlanRequest):
    return handle_generate_plan_request(req, route_path="/api/v1/plans")
