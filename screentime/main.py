"""
FastAPI application factory
"""
import logging
import traceback

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from screentime import __version__
from screentime.api.v1 import adjustment_types, adjustments, balance, time_entries
from screentime.application.errors import (
    ConflictError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from screentime.config import Settings, get_settings
from screentime.infrastructure.db.session import (
    check_db_connection,
    create_db_engine,
    create_session_factory,
)

logger = logging.getLogger(__name__)


class ErrorLoggingMiddleware(BaseHTTPMiddleware):
    """Logs any exception no handler translated and answers 500"""

    async def dispatch(self, request, call_next):
        try:
            return await call_next(request)
        except Exception:
            tb_str = traceback.format_exc()
            logger.error(
                f"\n{'='*60}\nERROR on {request.method} {request.url.path}\n{tb_str}{'='*60}"
            )
            return Response(content="Internal Server Error", status_code=500)


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def validation_error(request: Request, exc: ValidationError):
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc)},
        )

    @app.exception_handler(NotFoundError)
    async def not_found_error(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

    @app.exception_handler(ConflictError)
    async def conflict_error(request: Request, exc: ConflictError):
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})

    @app.exception_handler(StorageError)
    async def storage_error(request: Request, exc: StorageError):
        # Cause was logged by the repository; keep driver details out of the response
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal storage error"},
        )


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Application factory - creates and configures the FastAPI app

    The app owns its engine and session factory (app.state); request
    handlers get sessions through the get_db dependency.

    Args:
        settings: defaults to the cached environment settings

    Returns:
        Configured FastAPI app
    """
    settings = settings or get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL.upper())

    app = FastAPI(
        title="Screen Time",
        version=__version__,
        debug=settings.DEBUG,
    )

    engine = create_db_engine(settings)
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    app.add_middleware(ErrorLoggingMiddleware)
    _register_error_handlers(app)

    app.include_router(adjustment_types.router)
    app.include_router(adjustments.router)
    app.include_router(time_entries.router)
    app.include_router(balance.router)

    @app.get("/", tags=["system"])
    def index():
        """API version"""
        return {"version": __version__}

    # Health checks
    @app.get("/health", response_class=PlainTextResponse, tags=["system"])
    def health():
        """Health check endpoint"""
        return "ok"

    @app.get("/ready", response_class=PlainTextResponse, tags=["system"])
    def ready(request: Request):
        """Readiness check endpoint (database reachable)"""
        check_db_connection(request.app.state.engine)
        return "ok"

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "screentime.main:app",
        host=settings.SERVER_ADDRESS,
        port=settings.SERVER_PORT,
    )
