import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from taskboard.app.config import Settings, get_settings
from taskboard.app.core.errors import DecodeError, TaskError
from taskboard.app.core.logging_config import configure_logging
from taskboard.app.routers import tasks as tasks_router
from taskboard.app.shell import TaskApp

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    "decode": 400,
    "validation": 422,
    "not_found": 404,
    "already_exists": 409,
    "cancelled": 499,
    "storage": 503,
    "not_initialized": 503,
}


async def task_error_handler(request: Request, exc: TaskError) -> JSONResponse:
    status_code = ERROR_STATUS.get(exc.kind, 500)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=status_code, content={"detail": exc.message, "error": exc.kind})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # malformed path/query params are decode failures, same as a bad body
    parts = []
    for err in exc.errors():
        name = err.get("loc", ())[-1] if err.get("loc") else "request"
        parts.append(f"{name}: {err.get('msg', 'invalid value')}")
    error = DecodeError("invalid request format: " + "; ".join(parts))
    return await task_error_handler(request, error)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        task_app = TaskApp(settings)
        task_app.startup()
        app.state.task_app = task_app
        try:
            yield
        finally:
            task_app.shutdown()
            app.state.task_app = None

    app = FastAPI(
        title="Taskboard",
        version="1.0.0",
        docs_url="/docs",
        redoc_url=None,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(TaskError, task_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.include_router(tasks_router.api_router)
    app.include_router(tasks_router.health_router)
    return app


app = create_app()
