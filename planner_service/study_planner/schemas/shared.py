"""
Artifact: planner_service/study_planner/schemas/shared.py
Purpose: Defines reusable plan objects shared by responses and the reply parser.
Author: Study Planner Team
Created: 2026-10-19
Preconditions:
- Pydantic BaseModel is installed and importable.
Inputs:
- Acceptable: JSON-compatible values matching declared field types.
- Unacceptable: Dates outside YYYY-MM-DD, priorities outside high/medium/low, difficulty outside 1..5.
Postconditions:
- Shared Pydantic models validate and serialize contract-compatible data.
Returns:
- Typed model instances for generated tasks and plan analysis.
Errors/Exceptions:
- Pydantic validation errors for invalid payload data.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


class GeneratedTask(BaseModel):
    text: str
    description: Optional[str] = None
    priority: Literal["high", "medium", "low"] = "medium"
    date: str = Field(pattern=DATE_PATTERN)
    category: str
    subject: Optional[str] = None


class PlanAnalysis(BaseModel):
    estimatedDifficulty: int = Field(ge=1, le=5)
    totalHours: float = Field(ge=0)
    recommendedDays: int = Field(ge=0)
    modules: List[str] = []
