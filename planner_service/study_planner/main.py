from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.v1.router import api_v1_router
from .api.v1.routes.documents import handle_parse_document_request
from .api.v1.routes.health import get_health_status
from .api.v1.routes.plans import handle_generate_plan_request
from .core.config import settings
from .core.logging import configure_logging, get_logger
from .schemas.requests import ParseDocumentRequest, PlanRequest

configure_logging()
logger = get_logger("studyplanner.main")

app = FastAPI(title=settings.app_title)

# Browser clients call from any origin; OPTIONS preflight is answered here.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_v1_router, prefix="/api/v1")


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    # Web client reads `error`; `detail` is kept for FastAPI-style consumers.
    logger.debug("%s %s -> %d: %s", request.method, request.url.path, exc.status_code, exc.detail)
    return JSONResponse(
        {"error": exc.detail, "detail": exc.detail},
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


@app.get("/health")
def health_legacy():
    return get_health_status("/health")


@app.post("/generate-plan")
def generate_plan_legacy(req: PlanRequest):
    return handle_generate_plan_request(req, route_path="/generate-plan")


@app.post("/parse-document")
def parse_document_legacy(req: ParseDocumentRequest):
    return handle_parse_document_request(req, route_path="/parse-document")
