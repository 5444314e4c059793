import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.main import api_router
from app.core.config import settings
from app.core.database import Database
from app.core.exceptions import (
    ConstraintViolation,
    NotFoundError,
    ServiceError,
    TransientFailure,
    ValidationError,
)
from app.core.logging import setup_logging
from app.services.validation import format_errors

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    ConstraintViolation: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    TransientFailure: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def create_database() -> Database:
    return Database(
        settings.DATABASE_URL,
        echo=settings.DB_ECHO,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
    )


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": ValidationError.message, "errors": format_errors(exc.errors())},
        )

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        status_code = ERROR_STATUS.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
        content = {"detail": exc.message}
        if exc.errors:
            content["errors"] = exc.errors
        headers = {"Retry-After": "1"} if isinstance(exc, TransientFailure) else None
        if status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=status_code, content=content, headers=headers)


def create_app(database: Optional[Database] = None) -> FastAPI:
    setup_logging(settings.LOG_LEVEL)
    database = database or create_database()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.CREATE_TABLES_ON_STARTUP:
            database.create_all()
        yield
        database.dispose()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.PROJECT_VERSION,
        description="Backend for managing clients, projects, tasks and resources",
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        lifespan=lifespan,
    )
    app.state.database = database

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include API router
    app.include_router(api_router, prefix=settings.API_V1_STR)

    @app.get("/")
    async def root() -> dict[str, str]:
        return {"message": "Welcome to Business Manager API"}

    @app.get("/health")
    def health_check() -> dict[str, str]:
        database_ok = app.state.database.ping()
        return {
            "status": "healthy" if database_ok else "degraded",
            "database": "connected" if database_ok else "unavailable",
        }

    return app


app = create_app()
