"""
Artifact: planner_service/study_planner/core/errors.py
Purpose: Defines the service exception hierarchy and the HTTP status each one maps to.
Author: Study Planner Team
Created: 2026-10-19
Preconditions:
- None.
Inputs:
- Acceptable: Human-readable messages shown to the end user.
Postconditions:
- Route handlers can translate any PlannerError into an HTTP response via `status_code`.
Returns:
- Exception classes only.
Errors/Exceptions:
- Not applicable.
"""


class PlannerError(Exception):
    """Base class for failures surfaced to API callers."""

    status_code = 500


class InvalidRequestError(PlannerError):
    """Client-correctable input problem (missing fields, bad payloads)."""

    status_code = 400


class BinaryContentError(InvalidRequestError):
    pass


class UnsupportedDocumentError(InvalidRequestError):
    pass


class RateLimitedError(PlannerError):
    status_code = 429


class QuotaExceededError(PlannerError):
    status_code = 402


class GenerationServiceError(PlannerError):
    """The chat-completion gateway could not be reached or returned an error."""


class PlanParseError(PlannerError):
    """The model reply could not be turned into a task list."""


class MissingCredentialError(PlannerError):
    """Required gateway credential is not configured."""
