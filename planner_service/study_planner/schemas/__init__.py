"""Schema package exports for study planner service contracts."""

from .requests import ParseDocumentRequest, PlanRequest
from .responses import ParseDocumentResponse, PlanResponse
from .shared import GeneratedTask, PlanAnalysis

__all__ = [
    "GeneratedTask",
    "ParseDocumentRequest",
    "ParseDocumentResponse",
    "PlanAnalysis",
    "PlanRequest",
    "PlanResponse",
]
