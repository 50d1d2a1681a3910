"""
Artifact: planner_service/study_planner/services/plan_service.py
Purpose: Coordinates request-level generate-plan workflow execution for API handlers.
Author: Study Planner Team
Created: 2026-10-19
Preconditions:
- Incoming request is validated as PlanRequest.
Inputs:
- Acceptable: Subject with optional topic, free-text prompt, and pasted file content.
- Unacceptable: Missing subject, or binary data in fileContent.
Postconditions:
- Plan agent is executed with bounded file text and a single per-request `today`.
Returns:
- `PlanResponse` from the plan orchestrator.
Errors/Exceptions:
- InvalidRequestError / BinaryContentError for client-correctable input.
- Propagates orchestration errors to the API layer for HTTP error mapping.
"""

from datetime import date, datetime, timezone

from ..core.config import settings
from ..core.errors import InvalidRequestError
from ..core.logging import get_logger
from ..schemas.requests import PlanRequest
from ..schemas.responses import PlanResponse
from .document_text_service import prepare_inline_text

logger = get_logger("studyplanner.main")


def _run_plan_agent(request: PlanRequest, today: date, policy: str, file_content: str) -> PlanResponse:
    """Lazy import to avoid loading LLM dependencies at module import time."""
    from ..orchestrators.plan_orchestrator import run_plan_agent

    return run_plan_agent(request, today, policy, file_content=file_content)


def _today() -> date:
    return datetime.now(timezone.utc).date()


def generate_plan_workflow(req: PlanRequest, route_path: str) -> PlanResponse:
    """Execute the full generate-plan workflow for a validated request."""
    logger.info(
        "POST %s | subject=%r | topic=%r | prompt_len=%d | file_content_len=%d",
        route_path,
        req.subject,
        req.topic,
        len(req.prompt or ""),
        len(req.fileContent or ""),
    )

    if not (req.subject or "").strip():
        raise InvalidRequestError("Subject is required")

    file_text = prepare_inline_text(req.fileContent)
    today = _today()
    policy = settings.date_repair_policy()

    result = _run_plan_agent(req, today, policy, file_text.content)
    logger.info(
        "Plan completed | tasks=%d | analysis=%s",
        len(result.tasks),
        "yes" if result.analysis else "no",
    )
    return result
