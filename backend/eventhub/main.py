"""FastAPI application entry point."""
import logging
from http import HTTPStatus

from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from eventhub.config import settings
from eventhub.database import Base, engine
from eventhub.dependencies import throttle_request
from eventhub.exceptions import EventHubError
from eventhub.schemas.error import ApiError, FieldError
from eventhub.security.throttle import RequestThrottle

# Import routers
from eventhub.routers import auth, events, attendances

# Import all models so Base.metadata knows about them
from eventhub.models.user import User                # noqa: F401
from eventhub.models.event import Event              # noqa: F401
from eventhub.models.attendance import Attendance    # noqa: F401

logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Event Management",
    description="Event discovery and RSVP backend with role-based visibility",
    version="0.1.0",
    dependencies=[Depends(throttle_request)],
)
app.state.throttle = RequestThrottle(
    requests_per_minute=settings.RATE_LIMIT_REQUESTS_PER_MINUTE,
    enabled=settings.RATE_LIMIT_ENABLED,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(events.router, prefix="/api/events", tags=["Events"])
app.include_router(attendances.router, prefix="/api/attendances", tags=["Attendances"])


def _error_response(request: Request, status_code: int, error: str, message: str, validation_errors=None):
    body = ApiError(
        status=status_code,
        error=error,
        message=message,
        path=request.url.path,
        validation_errors=validation_errors,
    )
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body, exclude_none=True))


@app.exception_handler(EventHubError)
def handle_domain_error(request: Request, exc: EventHubError):
    logger.error("%s on %s: %s", exc.error, request.url.path, exc.message)
    return _error_response(request, exc.status_code, exc.error, exc.message)


@app.exception_handler(RequestValidationError)
def handle_validation_error(request: Request, exc: RequestValidationError):
    field_errors = [
        FieldError(
            field=".".join(str(part) for part in err["loc"] if part not in ("body", "query", "path")),
            rejected_value=err.get("input"),
            message=err["msg"],
        )
        for err in exc.errors()
    ]
    logger.error("Validation failed on %s: %d field error(s)", request.url.path, len(field_errors))
    return _error_response(request, 400, "Validation Failed", "Input validation failed", field_errors)


@app.exception_handler(StarletteHTTPException)
def handle_http_error(request: Request, exc: StarletteHTTPException):
    logger.error("HTTP %d on %s: %s", exc.status_code, request.url.path, exc.detail)
    return _error_response(request, exc.status_code, HTTPStatus(exc.status_code).phrase, str(exc.detail))


@app.exception_handler(Exception)
def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception("Unexpected error on %s", request.url.path)
    return _error_response(request, 500, "Internal Server Error", "An unexpected error occurred")


@app.on_event("startup")
def on_startup():
    """Create database tables on startup (for SQLite dev mode)."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
