"""
Artifact: planner_service/study_planner/schemas/responses.py
Purpose: Defines typed response payloads returned by the plan and document workflows.
Author: Study Planner Team
Created: 2026-10-19
Preconditions:
- Pydantic BaseModel and shared schema models are available.
Inputs:
- Acceptable: Repaired task lists and optional analysis objects.
Postconditions:
- Response objects serialize to the wire format the web client reads.
Returns:
- `PlanResponse` and `ParseDocumentResponse` model instances.
Errors/Exceptions:
- Pydantic validation errors when repaired output does not match schema.
"""

from typing import List, Optional

from pydantic import BaseModel

from .shared import GeneratedTask, PlanAnalysis


class PlanResponse(BaseModel):
    tasks: List[GeneratedTask]
    analysis: Optional[PlanAnalysis] = None

    def to_wire(self) -> dict:
        """Serialize for the HTTP body, omitting `analysis` when absent."""
        body = {"tasks": [task.model_dump() for task in self.tasks]}
        if self.analysis is not None:
            body["analysis"] = self.analysis.model_dump()
        return body


class ParseDocumentResponse(BaseModel):
    content: str
