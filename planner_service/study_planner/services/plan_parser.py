"""
Artifact: planner_service/study_planner/services/plan_parser.py
Purpose: Parses the chat model reply into a repaired task list and optional plan analysis.
Author: Study Planner Team
Created: 2026-10-19
Preconditions:
- `today` is the same date that was used to build the prompt for this request.
Inputs:
- Acceptable: JSON replies (optionally fenced) holding a task array, or an object with `tasks`.
- Unacceptable: Non-JSON replies or JSON without a task array.
Postconditions:
- Every task has a valid priority, category, subject, and YYYY-MM-DD date.
Returns:
- `PlanResponse` model instance.
Errors/Exceptions:
- PlanParseError when the reply is not JSON or has no task array. Repair itself never fails.
"""

import json
import re
from datetime import date, timedelta
from typing import Any, Optional

from pydantic import ValidationError

from ..core.config import DATE_POLICY_CONSECUTIVE, DATE_POLICY_SPACED
from ..core.errors import PlanParseError
from ..core.logging import get_logger
from ..schemas.requests import PlanRequest
from ..schemas.responses import PlanResponse
from ..schemas.shared import DATE_PATTERN, GeneratedTask, PlanAnalysis
from .plan_prompt_service import DEFAULT_TASK_SUBJECT

logger = get_logger("studyplanner.parser")

VALID_PRIORITIES = {"high", "medium", "low"}
DEFAULT_PRIORITY = "medium"
SPACED_FALLBACK_STEP_DAYS = 2

_FENCE_RE = re.compile(r"```(?:json)?[ \t]*\n?", re.IGNORECASE)
_DATE_RE = re.compile(DATE_PATTERN)
_ANALYSIS_KEYS = ("estimatedDifficulty", "totalHours", "recommendedDays", "modules")


def strip_code_fences(text: str) -> str:
    """Remove every ```json / ``` fence from a model reply."""
    return _FENCE_RE.sub("", (text or "").strip()).strip()


def is_valid_task_date(value: Any) -> bool:
    if not isinstance(value, str) or not _DATE_RE.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def repair_task_date(value: Any, index: int, today: date, policy: str) -> str:
    if policy == DATE_POLICY_SPACED:
        if is_valid_task_date(value):
            return value
        return (today + timedelta(days=index * SPACED_FALLBACK_STEP_DAYS)).isoformat()
    return (today + timedelta(days=index)).isoformat()


def _clean_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def repair_task(raw: Any, index: int, request: PlanRequest, today: date, policy: str) -> GeneratedTask:
    """Normalize one model-produced task; always succeeds by substituting defaults."""
    item = raw if isinstance(raw, dict) else {"text": raw}

    priority = _clean_str(item.get("priority")).lower()
    if priority not in VALID_PRIORITIES:
        priority = DEFAULT_PRIORITY

    description = _clean_str(item.get("description")) or None

    return GeneratedTask(
        text=_clean_str(item.get("text")) or f"Study session {index + 1}",
        description=description,
        priority=priority,
        date=repair_task_date(item.get("date"), index, today, policy),
        category=_clean_str(item.get("category")) or _clean_str(request.subject),
        subject=_clean_str(item.get("subject")) or _clean_str(request.topic) or DEFAULT_TASK_SUBJECT,
    )


def _parse_analysis(payload: dict) -> Optional[PlanAnalysis]:
    raw = payload.get("analysis")
    if raw is None and any(key in payload for key in _ANALYSIS_KEYS):
        raw = {key: payload.get(key) for key in _ANALYSIS_KEYS if key in payload}
    if not isinstance(raw, dict):
        return None
    try:
        return PlanAnalysis.model_validate(raw)
    except ValidationError as e:
        logger.warning("Dropping malformed plan analysis: %s", e.errors()[:3])
        return None


def parse_plan_reply(text: str, request: PlanRequest, today: date, policy: str = DATE_POLICY_CONSECUTIVE) -> PlanResponse:
    """
    Turn the raw model reply into a validated plan.

    Accepted shapes:
      - a JSON array of tasks
      - an object with a `tasks` array and an optional `analysis` object
        (or the analysis keys at top level)
    """
    cleaned = strip_code_fences(text)
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error("Failed to parse AI response as JSON: %s | excerpt=%r", e, cleaned[:500])
        raise PlanParseError("Failed to process AI response") from e

    analysis = None
    if isinstance(payload, list):
        raw_tasks = payload
    elif isinstance(payload, dict) and isinstance(payload.get("tasks"), list):
        raw_tasks = payload["tasks"]
        analysis = _parse_analysis(payload)
    else:
        logger.error("AI response missing tasks array | excerpt=%r", cleaned[:500])
        raise PlanParseError("Failed to process AI response")

    tasks = [repair_task(raw, index, request, today, policy) for index, raw in enumerate(raw_tasks)]
    logger.info(
        "Parsed plan | tasks=%d | policy=%s | analysis=%s",
        len(tasks),
        policy,
        "yes" if analysis else "no",
    )
    return PlanResponse(tasks=tasks, analysis=analysis)
