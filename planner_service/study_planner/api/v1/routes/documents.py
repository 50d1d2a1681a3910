"""
Artifact: planner_service/study_planner/api/v1/routes/documents.py
Purpose: Defines document text extraction route handlers.
Author: Study Planner Team
Created: 2026-10-19
Preconditions:
- Incoming request body conforms to ParseDocumentRequest schema.
Inputs:
- Acceptable: POST body with base64 `file`, `fileName`, and declared `fileType`.
- Unacceptable: Missing fields, invalid base64, or unsupported formats (mapped to 400).
Postconditions:
- Returns extracted text; unreadable documents yield a warning string with HTTP 200.
Returns:
- Dictionary containing `content`.
Errors/Exceptions:
- Raises HTTPException(400) for invalid input and HTTPException(500) for unexpected failures.
"""

import traceback

from fastapi import APIRouter, HTTPException

from ....core.errors import PlannerError
from ....core.logging import get_logger
from ....schemas.requests import ParseDocumentRequest
from ....schemas.responses import ParseDocumentResponse
from ....services.document_text_service import parse_document_workflow

logger = get_logger("studyplanner.main")
router = APIRouter(tags=["documents"])


def handle_parse_document_request(req: ParseDocumentRequest, route_path: str):
    """Shared parse-document handler body used by v1 and legacy routes."""
    try:
        result = parse_document_workflow(req, route_path=route_path)
        return ParseDocumentResponse(content=result.content).model_dump()
    except PlannerError as e:
        logger.warning("Document request failed (%d): %s", e.status_code, e)
        raise HTTPException(status_code=e.status_code, detail=str(e))
    except Exception as e:
        logger.error("parse-document error: %s", repr(e))
        logger.debug("Traceback:\n%s", traceback.format_exc())
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/documents/parse")
def parse_document(req: ParseDocumentRequest):
    return handle_parse_document_request(req, route_path="/api/v1/documents/parse")
