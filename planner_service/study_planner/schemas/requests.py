"""
Artifact: planner_service/study_planner/schemas/requests.py
Purpose: Defines transport request models accepted by the generate-plan and parse-document workflows.
Author: Study Planner Team
Created: 2026-10-19
Preconditions:
- Pydantic BaseModel and typing modules are available.
Inputs:
- Acceptable: JSON objects using the web client's camelCase field names.
- Unacceptable: Non-string field values.
Postconditions:
- Request data is validated into typed models used by services/routes.
  Required-field checks happen in the services so they surface as 400 responses.
Returns:
- `PlanRequest` and `ParseDocumentRequest` model instances.
Errors/Exceptions:
- Pydantic validation errors for malformed request bodies.
"""

from typing import Optional

from pydantic import BaseModel


class PlanRequest(BaseModel):
    subject: Optional[str] = ""
    topic: Optional[str] = None
    prompt: Optional[str] = None
    fileContent: Optional[str] = None


class ParseDocumentRequest(BaseModel):
    file: Optional[str] = ""
    fileName: Optional[str] = ""
    fileType: Optional[str] = ""
