from contextlib import asynccontextmanager, suppress
from datetime import datetime, UTC
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException
import asyncio
import logging
from .config import Settings, get_settings
from .errors import LiventsError, StorageError
from .routers import events, recordings, status
from .store import RecordStore, build_store

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


async def heartbeat(service_name: str, interval: int):
    while True:
        await asyncio.sleep(interval)
        logger.info("%s heartbeat, running at %s", service_name, datetime.now(UTC).isoformat())


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    store: RecordStore = app.state.store

    store.init()
    logger.info("%s listening on port %s", settings.service_name, settings.port)

    heartbeat_task = None
    if settings.heartbeat_seconds > 0:
        heartbeat_task = asyncio.create_task(
            heartbeat(settings.service_name, settings.heartbeat_seconds)
        )
    app.state.heartbeat_task = heartbeat_task
    yield
    if heartbeat_task is not None:
        heartbeat_task.cancel()
        with suppress(asyncio.CancelledError):
            await heartbeat_task
    store.close()
    logger.info("%s shut down", settings.service_name)


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request body"

    first = errors[0]
    fields = [str(part) for part in first.get("loc", ()) if part != "body"]
    if not fields:
        return f"Invalid request body: {first.get('msg', 'invalid value')}"
    return f"{'.'.join(fields)}: {first.get('msg', 'invalid value')}"


def create_app(settings: Settings | None = None, store: RecordStore | None = None) -> FastAPI:
    settings = settings or get_settings()
    store = store or build_store(settings)

    app = FastAPI(title=settings.service_name, lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store

    @app.middleware("http")
    async def cors_policy(request: Request, call_next):
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=CORS_HEADERS)

        response = await call_next(request)
        for name, value in CORS_HEADERS.items():
            response.headers[name] = value
        return response

    @app.exception_handler(LiventsError)
    async def livents_error_handler(request: Request, exc: LiventsError):
        message = exc.message
        if isinstance(exc, StorageError):
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
            message = "Internal storage error"
        return JSONResponse(status_code=exc.status_code, content={"error": message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": _describe_validation_error(exc)})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        # unknown paths and known paths with the wrong method are both "not found"
        if exc.status_code in (404, 405):
            return JSONResponse(
                status_code=404,
                content={"error": "Route not found", "path": request.url.path},
            )
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        # served outside the http middleware, so CORS headers are set here
        logger.error("%s %s failed", request.method, request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"},
            headers=CORS_HEADERS,
        )

    app.include_router(status.router)
    app.include_router(events.router)
    app.include_router(recordings.router)

    return app


app = create_app()
