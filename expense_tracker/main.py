"""FastAPI application entry point.

Run with ``uvicorn expense_tracker.main:create_app --factory`` or the
``expense-tracker`` console script.
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import Engine
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from expense_tracker.api import auth, categories, expenses, users
from expense_tracker.config import Settings, get_settings
from expense_tracker.database import create_db_engine, create_session_factory, init_db
from expense_tracker.errors import (
    AppError,
    FieldError,
    InternalError,
    UnauthorizedError,
    ValidationError,
)
from expense_tracker.services.categories import CategoryService

logger = logging.getLogger(__name__)

# Request locations FastAPI prefixes onto validation error paths
_ERROR_LOCATIONS = {"body", "query", "path", "header"}


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def error_response(exc: AppError) -> JSONResponse:
    content = {"success": False, "error": exc.message}
    if isinstance(exc, ValidationError) and exc.errors:
        content["details"] = [e.to_dict() for e in exc.errors]
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthorizedError) else None
    return JSONResponse(status_code=exc.status_code, content=content, headers=headers)


def _field_name(loc: tuple) -> str:
    if not loc:
        return "request"
    parts = [str(p) for p in loc if p not in _ERROR_LOCATIONS]
    return ".".join(parts) or str(loc[0])


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if isinstance(exc, InternalError):
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = [FieldError(_field_name(tuple(e["loc"])), e["msg"]) for e in exc.errors()]
        return error_response(ValidationError(errors=errors))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(SQLAlchemyError)
    async def storage_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error(f"Storage error on {request.method} {request.url.path}: {exc}", exc_info=exc)
        return error_response(InternalError())

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
        return error_response(InternalError())


def seed_default_categories(app: FastAPI) -> None:
    """Run the one-time default category seed."""
    try:
        with app.state.session_factory() as db:
            result = CategoryService(db).seed_defaults()
    except SQLAlchemyError as e:
        logger.warning(f"Failed to seed default categories: {e}", exc_info=e)
        return

    if result.failed:
        logger.warning(f"Default categories partially seeded, failed: {result.failed}")
    elif result.created:
        logger.info(f"Seeded default categories: {result.created}")
    else:
        logger.info("Default categories already present")


def create_app(settings: Settings | None = None, engine: Engine | None = None) -> FastAPI:
    """Build the application around an explicitly provided storage engine."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    if engine is None:
        engine = create_db_engine(settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Handle application startup and shutdown events."""
        init_db(engine)
        seed_default_categories(app)
        if settings.jwt_secret == "change-me-in-production":  # noqa: S105
            logger.warning("Using default JWT secret. Set JWT_SECRET outside development!")
        yield
        engine.dispose()

    app = FastAPI(
        title="Expense Tracker API",
        description="Personal expense tracking with per-user categories and analytics",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f}ms)"
        )
        return response

    register_exception_handlers(app)

    # Register routers; /api/users/me must precede the admin /{user_id} routes
    app.include_router(auth.router)
    app.include_router(categories.router)
    app.include_router(expenses.router)
    app.include_router(users.router)
    app.include_router(users.admin_router)

    @app.get("/api/health")
    async def health_check():
        """Health check endpoint."""
        return {"success": True, "status": "ok", "environment": settings.environment}

    return app


def run() -> None:
    import uvicorn

    uvicorn.run("expense_tracker.main:create_app", factory=True, host="0.0.0.0", port=4000)
