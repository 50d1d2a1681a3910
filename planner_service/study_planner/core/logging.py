"""
Artifact: planner_service/study_planner/core/logging.py
Purpose: Provides centralized logging configuration and named logger accessors.
Author: Study Planner Team
Created: 2026-10-19
Preconditions:
- Python logging module is available.
Inputs:
- Acceptable: Logger names as non-empty strings, e.g. "studyplanner.documents".
Postconditions:
- Root logging is configured once and loggers can be retrieved by name.
Returns:
- `configure_logging` returns None; `get_logger` returns `logging.Logger`.
"""

import logging


def configure_logging() -> None:
    """Apply process-wide logging configuration for the service."""
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def get_logger(name: str) -> logging.Logger:
    """Return a named logger instance."""
    return logging.getLogger(name)
