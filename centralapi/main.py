import uuid
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from centralapi import __version__
from centralapi.api.routes import auth, collections, health, images, recommended, users
from centralapi.config import settings
from centralapi.database import dispose_engine, init_models
from centralapi.errors import CentralApiError
from centralapi.logging import configure_logging

configure_logging()

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("api_starting", environment=settings.environment, version=__version__)
    if settings.environment == "development":
        await init_models()
    yield
    await dispose_engine()
    logger.info("api_stopped")


app = FastAPI(
    title="CentralAPI",
    version=__version__,
    docs_url="/docs",
    redoc_url=None,
    lifespan=lifespan,
)


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", request.headers.get("X-Request-ID", ""))


def _error_response(
    request: Request, status: int, code: str, message: str, *, retryable: bool = False
) -> JSONResponse:
    response = JSONResponse(
        status_code=status,
        content={"error": code, "message": message, "retryable": retryable},
    )
    response.headers["X-Request-ID"] = _request_id(request)
    if status == 401:
        response.headers["WWW-Authenticate"] = "Bearer"
    return response


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    """Bind a request ID into structlog context and echo it in X-Request-ID."""
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        request_id=request_id, method=request.method, path=request.url.path
    )
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


@app.exception_handler(CentralApiError)
async def central_api_error_handler(request: Request, exc: CentralApiError) -> JSONResponse:
    """Render domain errors as ErrorResponse JSON."""
    if exc.status_code >= 500:
        logger.error("request_failed", error=exc.code, message=exc.message)
    else:
        logger.info("request_rejected", status=exc.status_code, error=exc.code)
    return _error_response(
        request, exc.status_code, exc.code, exc.message, retryable=exc.retryable
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Flatten Pydantic errors into a single ErrorResponse message."""
    messages = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err["loc"])
        messages.append(f"{loc}: {err['msg']}")
    return _error_response(request, 422, "validation_error", "; ".join(messages))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        method=request.method,
        error_type=type(exc).__name__,
        exc_info=exc,
    )
    return _error_response(
        request, 500, "internal_error", "An unexpected error occurred", retryable=True
    )


app.include_router(health.router)
for module in (auth, users, collections, images, recommended):
    app.include_router(module.router, prefix="/api")
