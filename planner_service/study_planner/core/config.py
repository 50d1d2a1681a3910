"""
Artifact: planner_service/study_planner/core/config.py
Purpose: Centralizes environment loading and static service configuration values.
Author: Study Planner Team
Created: 2026-10-19
Revised:
- 2026-10-19: Added gateway, retry, and date-repair policy accessors. (Study Planner Team)
Preconditions:
- Environment variables may be present in process env and optional .env file.
Inputs:
- Acceptable: String environment variables such as LLM_GATEWAY_API_KEY or DATE_REPAIR_POLICY.
- Unacceptable: Non-numeric values for numeric settings (defaults are used instead).
Postconditions:
- Dotenv variables are loaded and configuration constants are available to callers.
Returns:
- Settings object with service title and helper accessors.
Errors/Exceptions:
- No explicit exceptions; a missing API key is handled by the plan orchestrator.
"""

import os

from dotenv import load_dotenv

from .logging import get_logger

load_dotenv()

logger = get_logger("studyplanner.config")

DATE_POLICY_CONSECUTIVE = "consecutive"
DATE_POLICY_SPACED = "spaced"
DATE_POLICIES = {DATE_POLICY_CONSECUTIVE, DATE_POLICY_SPACED}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r; using %s", name, raw, default)
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r; using %s", name, raw, default)
        return default


class Settings:
    """Application-level configuration values."""

    app_title: str = "Study Planner Service"

    @staticmethod
    def llm_api_key() -> str:
        return os.getenv("LLM_GATEWAY_API_KEY", "").strip()

    @staticmethod
    def llm_base_url() -> str:
        return os.getenv("LLM_GATEWAY_BASE_URL", "https://ai.gateway.lovable.dev/v1").strip()

    @staticmethod
    def llm_timeout_seconds() -> float:
        return _env_float("LLM_TIMEOUT_SECONDS", 60.0)

    @staticmethod
    def llm_max_retries() -> int:
        return max(0, _env_int("LLM_MAX_RETRIES", 2))

    @staticmethod
    def llm_retry_backoff_seconds() -> float:
        return max(0.0, _env_float("LLM_RETRY_BACKOFF_SECONDS", 0.5))

    @staticmethod
    def date_repair_policy() -> str:
        raw = os.getenv("DATE_REPAIR_POLICY", DATE_POLICY_CONSECUTIVE).strip().lower()
        if raw not in DATE_POLICIES:
            logger.warning("Unknown DATE_REPAIR_POLICY=%r; using %s", raw, DATE_POLICY_CONSECUTIVE)
            return DATE_POLICY_CONSECUTIVE
        return raw


settings = Settings()
