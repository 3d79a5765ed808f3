"""
To launch:
uvicorn task_tracker.app:app --reload
"""
from task_tracker.utils import load_local_env

load_local_env()

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from task_tracker import __version__
from task_tracker.routes import api_router
from task_tracker.services.errors import TaskTrackerError, TaskValidationError
from task_tracker.services.task_store import TaskStore, create_task_store

logger = logging.getLogger(__name__)


# Configure uvicorn access logger to filter health probes
class HealthCheckFilter(logging.Filter):
    def filter(self, record):
        # Uvicorn passes (client, method, path, http_version, status) as args
        args = record.args
        if isinstance(args, tuple) and len(args) >= 3 and args[2] == "/health":
            return False
        if '"GET /health ' in str(record.getMessage()):
            return False
        return True


# Apply filter to uvicorn access logger
uvicorn_access_logger = logging.getLogger("uvicorn.access")
uvicorn_access_logger.addFilter(HealthCheckFilter())


def error_response(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error, "message": message},
    )


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log each request and turn unexpected exceptions into a generic 500.

    Nothing from the exception reaches the caller; the traceback goes to the
    log only.
    """

    async def dispatch(self, request: Request, call_next):
        logger.info("%s %s", request.method, request.url.path)
        try:
            return await call_next(request)
        except Exception:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            return error_response(500, "Internal Server Error", "An unexpected error occurred")


async def handle_task_tracker_error(request: Request, exc: TaskTrackerError) -> JSONResponse:
    logger.info("%s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.message)
    return error_response(exc.status_code, exc.category, exc.message)


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    error = TaskValidationError.from_pydantic(exc)
    logger.info("%s %s -> 400 %s", request.method, request.url.path, error.message)
    return error_response(400, error.category, error.message)


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        return error_response(
            404, "Not Found", f"Route {request.method} {request.url.path} not found"
        )
    return error_response(exc.status_code, str(exc.detail), str(exc.detail))


def create_app(task_store: Optional[TaskStore] = None) -> FastAPI:
    """
    Build the API application.

    The store is created here, once, and lives on ``app.state`` for the
    lifetime of the app; request handlers receive it through the
    ``get_task_store`` dependency.

    Args:
        task_store: Store to serve. Defaults to the backend selected by
            TASK_STORE_BACKEND.
    """
    store = task_store or create_task_store()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan: startup and shutdown"""
        # Startup
        logger.info("Task API ready with %s", type(store).__name__)
        yield
        # Shutdown: release the store
        await store.close()

    app = FastAPI(
        title="Task Management API",
        description="A minimal in-memory task tracker",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.task_store = store

    origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    app.add_exception_handler(TaskTrackerError, handle_task_tracker_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)

    app.include_router(api_router)
    return app


app = create_app()
