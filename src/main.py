"""FastAPI application initialization."""

from contextlib import asynccontextmanager
from uuid import uuid4

from dotenv import load_dotenv

# Load environment variables before anything else
load_dotenv()

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.api.auth import router as auth_router
from src.api.blog import router as blog_router
from src.api.contact import router as contact_router
from src.api.events import router as events_router
from src.api.middleware import CorrelationIdMiddleware
from src.api.registrations import router as registrations_router
from src.api.reviews import router as reviews_router
from src.api.routes import router
from src.api.settings import router as settings_router
from src.api.team import router as team_router
from src.config import get_settings
from src.database import close_database, init_database, run_migrations
from src.services.credential_service import CredentialService
from src.services.exceptions import AppError
from src.services.logging_service import configure_logging, get_logger

VERSION = "1.0.0"

VALUE_ERROR_PREFIX = "Value error, "


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    settings = get_settings()
    configure_logging(settings.log_level)
    logger = get_logger("main")

    # The API cannot serve anything without its database
    await init_database()
    await run_migrations()
    logger.info("database_initialized")

    await CredentialService().seed_admin()

    logger.info(
        "application_started",
        app_env=settings.app_env,
        log_level=settings.log_level,
        frontend_url=settings.frontend_url,
    )

    yield

    await close_database()
    logger.info("application_shutdown")


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Backend for the Coding Council community website",
    version=VERSION,
    lifespan=lifespan,
)


def _correlation_id(request: Request) -> str:
    return getattr(request.state, "correlation_id", None) or str(uuid4())


def _error_response(
    request: Request, status_code: int, content: dict
) -> JSONResponse:
    correlation_id = _correlation_id(request)
    headers = {"X-Correlation-Id": correlation_id}
    if status_code == 401:
        headers["WWW-Authenticate"] = "Bearer"
    return JSONResponse(
        status_code=status_code,
        content={**content, "correlation_id": correlation_id},
        headers=headers,
    )


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render service-layer errors with their mapped status code."""
    structlog.get_logger().info(
        "request_rejected",
        error_type=type(exc).__name__,
        status=exc.status_code,
        error=exc.message,
    )
    return _error_response(request, exc.status_code, {"error": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return _error_response(request, exc.status_code, {"error": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle Pydantic validation errors with user-friendly messages.

    Returns 400 Bad Request with the first problem spelled out in
    ``detail`` and every problem listed in ``errors``.
    """
    errors = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        message = str(error.get("msg", "Validation failed"))
        if message.startswith(VALUE_ERROR_PREFIX):
            message = message[len(VALUE_ERROR_PREFIX):]
        errors.append({"field": ".".join(loc) or "body", "message": message})

    if errors:
        detail = f"Field '{errors[0]['field']}': {errors[0]['message']}"
    else:
        detail = "Request validation failed"

    structlog.get_logger().warning("validation_error", detail=detail, errors=errors)

    return _error_response(
        request,
        400,
        {"error": "Validation error", "detail": detail, "errors": errors},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    structlog.get_logger().error(
        "unhandled_exception",
        path=request.url.path,
        error_type=type(exc).__name__,
        exc_info=exc,
    )
    return _error_response(request, 500, {"error": "Internal Server Error"})


# CORS middleware for the website frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Correlation ID middleware for request tracking and observability
app.add_middleware(CorrelationIdMiddleware)


@app.get("/")
async def root() -> dict:
    return {"name": settings.app_name, "version": VERSION, "docs": f"{settings.api_prefix}/health"}


for api_router in (
    router,
    auth_router,
    events_router,
    team_router,
    registrations_router,
    contact_router,
    blog_router,
    reviews_router,
    settings_router,
):
    app.include_router(api_router, prefix=settings.api_prefix)
