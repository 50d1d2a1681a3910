"""
Artifact: planner_service/study_planner/orchestrators/plan_orchestrator.py
Purpose: Runs the plan-generation LLM flow: prompt assembly, one gateway call, and reply parsing.
Author: Study Planner Team
Created: 2026-10-19
Revised:
- 2026-10-19: Added request timeout and transport-only bounded retry with backoff. (Study Planner Team)
Preconditions:
- LLM_GATEWAY_API_KEY is configured in environment.
- LangChain/OpenAI dependencies are installed.
Inputs:
- Acceptable: Validated PlanRequest, bounded document text, the request's `today`, and a date policy.
- Unacceptable: Missing credentials.
Postconditions:
- Returns a repaired plan parsed from the model output.
Returns:
- `PlanResponse` model instance.
Errors/Exceptions:
- MissingCredentialError before any call when the API key is absent.
- RateLimitedError (429) and QuotaExceededError (402), never retried.
- GenerationServiceError for other gateway errors or exhausted transport retries.
- PlanParseError for unparseable replies.
"""

import time
from datetime import date
from typing import Optional

import openai
from langchain_core.messages import HumanMessage, SystemMessage

from ..clients.llm_client import build_gateway_chat_client
from ..core.config import settings
from ..core.errors import (
    GenerationServiceError,
    MissingCredentialError,
    PlannerError,
    QuotaExceededError,
    RateLimitedError,
)
from ..core.logging import get_logger
from ..schemas.requests import PlanRequest
from ..schemas.responses import PlanResponse
from ..services.plan_parser import parse_plan_reply
from ..services.plan_prompt_service import build_system_prompt, build_user_message

logger = get_logger("studyplanner.agent")

MODEL_NAME = "google/gemini-2.5-flash"
TEMPERATURE = 0.7

RATE_LIMIT_MESSAGE = "Request limit reached. Please try again in a few seconds."
QUOTA_MESSAGE = "Insufficient credits. Add more credits to your account."
UNREACHABLE_MESSAGE = "Could not connect to the AI generation service"


def _to_text(x):
    """Normalize LangChain outputs into a plain string."""
    if x is None:
        return ""
    if isinstance(x, str):
        return x
    if isinstance(x, list):
        return "\n".join(_to_text(i) for i in x)
    if isinstance(x, dict):
        return _to_text(x.get("text"))
    content = getattr(x, "content", None)
    if content is not None:
        return _to_text(content)
    return str(x)


def _build_client(api_key: str):
    return build_gateway_chat_client(
        model_name=MODEL_NAME,
        temperature=TEMPERATURE,
        base_url=settings.llm_base_url(),
        api_key=api_key,
        timeout=settings.llm_timeout_seconds(),
    )


def _map_status_error(error: openai.APIStatusError) -> PlannerError:
    status = error.status_code
    if status == 429:
        logger.warning("AI gateway rate limited the request")
        return RateLimitedError(RATE_LIMIT_MESSAGE)
    if status == 402:
        logger.warning("AI gateway reported insufficient credits")
        return QuotaExceededError(QUOTA_MESSAGE)
    logger.error("AI gateway error: %s %r", status, str(error)[:500])
    return GenerationServiceError(UNREACHABLE_MESSAGE)


def invoke_plan_model(system_prompt: str, user_message: str) -> str:
    """
    Send exactly one logical chat-completion request and return the reply text.

    Connection failures and timeouts are retried up to LLM_MAX_RETRIES times with
    exponential backoff. HTTP status errors are mapped and raised immediately.
    """
    api_key = settings.llm_api_key()
    if not api_key:
        raise MissingCredentialError("LLM_GATEWAY_API_KEY is not configured")

    logger.info("Initializing LLM | model=%s temperature=%s", MODEL_NAME, TEMPERATURE)
    llm = _build_client(api_key)
    messages = [
        SystemMessage(content=system_prompt),
        HumanMessage(content=user_message),
    ]

    max_retries = settings.llm_max_retries()
    backoff = settings.llm_retry_backoff_seconds()
    attempts = max_retries + 1

    last_error: Optional[Exception] = None
    for attempt in range(1, attempts + 1):
        try:
            logger.info("Gateway attempt %d/%d…", attempt, attempts)
            t0 = time.time()

            response = llm.invoke(messages)

            elapsed_ms = int((time.time() - t0) * 1000)
            logger.info("LLM returned in %dms (attempt %d)", elapsed_ms, attempt)

            text = _to_text(response).strip()
            logger.debug("Model output (first 500 chars): %r", text[:500])
            return text
        except openai.APIStatusError as e:
            raise _map_status_error(e) from e
        except openai.APIConnectionError as e:
            last_error = e
            logger.warning("Attempt %d failed: %s", attempt, repr(e))
            if attempt < attempts:
                time.sleep(backoff * (2 ** (attempt - 1)))

    logger.error("All %d gateway attempts failed. Last error: %r", attempts, last_error)
    raise GenerationServiceError(UNREACHABLE_MESSAGE) from last_error


def run_plan_agent(
    request: PlanRequest,
    today: date,
    policy: str,
    file_content: Optional[str] = None,
) -> PlanResponse:
    """Build the prompt, call the model once, and parse/repair the reply."""
    system_prompt = build_system_prompt(request, today, policy, file_content=file_content)
    user_message = build_user_message(request)
    logger.debug("System prompt built | chars=%d | today=%s", len(system_prompt), today.isoformat())

    reply = invoke_plan_model(system_prompt, user_message)
    return parse_plan_reply(reply, request, today, policy)
