import contextlib
import logging
import signal
import time
import uuid
from contextlib import asynccontextmanager
from http import HTTPStatus

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse, Response

from kvserver.api import deps
from kvserver.api.routes import data, stats
from kvserver.core.config import Settings, settings
from kvserver.core.logging import client_ip_ctx, configure_logging, request_id_ctx
from kvserver.schemas.common import ErrorResponse
from kvserver.schemas.data import HealthOut
from kvserver.services.reporter import Reporter
from kvserver.services.shutdown import ShutdownSignal
from kvserver.services.store import Store

configure_logging(settings.log_level)

logger = logging.getLogger("kvserver")

REPORTER_STOP_TIMEOUT = 5.0


def _error_body(request: Request, code: str, message: str, details=None) -> dict:
    return ErrorResponse.build(
        code,
        message,
        request_id=getattr(request.state, "request_id", None),
        details=details,
    ).model_dump()


def _status_code_name(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase.lower().replace(" ", "_")
    except ValueError:
        return f"http_{status_code}"


@asynccontextmanager
async def lifespan(app: FastAPI):
    app_settings: Settings = app.state.settings
    reporter = Reporter(
        app.state.store,
        app.state.shutdown,
        interval=app_settings.report_interval_seconds,
    )
    app.state.reporter = reporter
    reporter.start()
    logger.info(
        "server started",
        extra={"event": {"report_interval_seconds": app_settings.report_interval_seconds}},
    )
    try:
        yield
    finally:
        logger.info("shutting down server")
        try:
            await run_in_threadpool(reporter.stop, REPORTER_STOP_TIMEOUT)
        except Exception:
            logger.exception("error while stopping status reporter")


async def add_request_id(request: Request, call_next):
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id
    request_id_ctx.set(request_id)
    if request.client:
        client_ip_ctx.set(request.client.host)
    start = time.monotonic()
    response: Response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    duration_ms = int((time.monotonic() - start) * 1000)
    logging.getLogger("access").info(
        "request",
        extra={
            "event": {
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            }
        },
    )
    return response


async def limit_body_size(request: Request, call_next):
    max_body_bytes = request.app.state.settings.max_body_bytes
    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit() and int(content_length) > max_body_bytes:
        return JSONResponse(
            status_code=413,
            content=_error_body(request, "payload_too_large", "Request body too large"),
        )
    return await call_next(request)


async def generic_exception_handler(request: Request, exc: Exception):
    logger.exception(
        "Unhandled exception",
        extra={
            "event": {
                "method": request.method,
                "path": request.url.path,
                "request_id": getattr(request.state, "request_id", None),
            }
        },
    )
    message = "Internal server error"
    details = None
    if not request.app.state.settings.is_production:
        message = f"{exc.__class__.__name__}: {exc}"
        details = [{"type": exc.__class__.__name__}]
    return JSONResponse(
        status_code=500,
        content=_error_body(request, "internal_server_error", message, details),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content=_error_body(
            request,
            "bad_request",
            "Request body must be a JSON object of string values",
            jsonable_encoder(exc.errors()),
        ),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
        content=_error_body(request, _status_code_name(exc.status_code), str(exc.detail)),
    )


def create_app(app_settings: Settings | None = None, store: Store | None = None) -> FastAPI:
    """Build an application around its own store and shutdown signal."""
    app_settings = app_settings or settings
    app = FastAPI(title=app_settings.app_name, lifespan=lifespan)
    app.state.settings = app_settings
    app.state.store = store if store is not None else Store()
    app.state.shutdown = ShutdownSignal()

    app.middleware("http")(limit_body_size)
    app.middleware("http")(add_request_id)

    app.add_exception_handler(Exception, generic_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    @app.get("/health/live", response_model=HealthOut)
    def live():
        return {"status": "ok"}

    @app.get("/health/ready", response_model=HealthOut, responses={503: {"model": HealthOut}})
    def ready(shutdown: ShutdownSignal = Depends(deps.get_shutdown_signal)):
        if shutdown.is_fired:
            return JSONResponse(status_code=503, content={"status": "shutting_down"})
        return {"status": "ready"}

    app.include_router(data.router)
    app.include_router(stats.router)
    return app


app = create_app()


def run() -> None:
    # uvicorn re-raises the caught signal after shutdown; SIGTERM must end
    # like SIGINT so the final record is written and the exit is clean.
    signal.signal(signal.SIGTERM, signal.default_int_handler)
    logger.info(
        "server starting",
        extra={"event": {"host": settings.host, "port": settings.port}},
    )
    with contextlib.suppress(KeyboardInterrupt):
        uvicorn.run(
            app,
            host=settings.host,
            port=settings.port,
            log_config=None,
            access_log=False,
            timeout_graceful_shutdown=settings.graceful_shutdown_seconds,
        )
    logger.info("server gracefully stopped")


if __name__ == "__main__":
    run()
