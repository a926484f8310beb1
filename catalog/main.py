# catalog/main.py
from __future__ import annotations

import time
import uuid
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from catalog.core.logging import setup_logging
from catalog.core.settings import settings
from catalog.database import DATABASE_URL, SessionLocal, init_db_if_requested, mask_url
from catalog.routers.product import router as products_router

APP_STARTED_MONO = time.monotonic()
APP_STARTED_TS = int(time.time())

# --- Logging ---
setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger("catalog.api")

tags_metadata = [
    {"name": "health", "description": "Liveness and store connectivity"},
    {"name": "products", "description": "Perfume catalog CRUD"},
]


def _get_req_id_from_headers(request: Request) -> str:
    # X-Request-ID, then X-Correlation-ID; generated when both are missing
    return (
        request.headers.get("x-request-id")
        or request.headers.get("x-correlation-id")
        or uuid.uuid4().hex[:12]
    )


def _json_error(request: Request, status_code: int, content: dict, headers: dict | None = None) -> JSONResponse:
    hdrs = dict(headers or {})
    hdrs.setdefault("X-Request-ID", _get_req_id_from_headers(request))
    return JSONResponse(status_code=status_code, content=content, headers=hdrs)


# --- Middleware func (registered after app is created) ---
async def request_context_mw(request: Request, call_next):
    """
    - Generates/propagates X-Request-ID
    - Adds basic security headers
    - Server-Timing / X-Process-Time
    """
    req_id = _get_req_id_from_headers(request)

    start = time.perf_counter()
    response: Response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000

    response.headers.setdefault("X-Request-ID", req_id)
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("Referrer-Policy", "no-referrer")
    response.headers.setdefault("Cache-Control", "no-store")
    response.headers.setdefault("X-App-Version", settings.APP_VERSION)
    response.headers.setdefault("Server-Timing", f"app;dur={duration_ms:.1f}")
    response.headers.setdefault("X-Process-Time", f"{duration_ms:.1f}ms")
    return response


def _store_is_up() -> bool:
    try:
        with SessionLocal() as db:
            return db.execute(text("SELECT 1")).scalar_one() == 1
    except SQLAlchemyError:
        logger.exception("Store connectivity check failed")
        return False


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: optional create_all, then a sanity check against the store
    logger.info("Starting %s %s (db=%s)", settings.APP_TITLE, settings.APP_VERSION, mask_url(DATABASE_URL))
    try:
        init_db_if_requested()
    except SQLAlchemyError:
        logger.exception("Creating tables FAILED")
    if _store_is_up():
        logger.info("DB startup check OK")
    else:
        logger.error("DB startup check FAILED; /health will report db=false until the store answers")
    yield
    logger.info("Shutting down %s", settings.APP_TITLE)


# --- App factory (create app BEFORE registering middleware) ---
app = FastAPI(
    title=settings.APP_TITLE,
    version=settings.APP_VERSION,
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

app.middleware("http")(request_context_mw)

_origins = settings.cors_origins
if _origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_origins,
        # browsers refuse credentials together with a wildcard origin
        allow_credentials="*" not in _origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Total-Count", "X-Request-ID", "Server-Timing", "X-Process-Time", "X-App-Version"],
    )


# --- Exception handlers ---
@app.exception_handler(RequestValidationError)
async def _validation_handler(request: Request, exc: RequestValidationError):
    return _json_error(request, status.HTTP_422_UNPROCESSABLE_ENTITY, {"detail": jsonable_encoder(exc.errors())})


# Starlette 404/405 for unknown routes, answered as JSON
@app.exception_handler(StarletteHTTPException)
async def _starlette_http_exc_handler(request: Request, exc: StarletteHTTPException):
    detail = exc.detail
    if exc.status_code == status.HTTP_404_NOT_FOUND and detail == "Not Found":
        detail = {"message": "Not Found", "path": str(request.url.path)}
    elif exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        detail = {"message": "Method Not Allowed", "path": str(request.url.path)}
    return _json_error(request, exc.status_code, {"detail": detail}, exc.headers)


@app.exception_handler(HTTPException)
async def _http_exc_handler(request: Request, exc: HTTPException):
    return _json_error(request, exc.status_code, {"detail": exc.detail}, exc.headers)


@app.exception_handler(SQLAlchemyError)
async def _store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Store error on %s %s: %s", request.method, request.url.path, exc)
    return _json_error(request, status.HTTP_500_INTERNAL_SERVER_ERROR, {"detail": "Internal Server Error"})


@app.exception_handler(Exception)
async def _unhandled_exc_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error: %s", exc)
    return _json_error(request, status.HTTP_500_INTERNAL_SERVER_ERROR, {"detail": "Internal Server Error"})


# --- Routes: health ---
@app.get("/", tags=["health"])
def root():
    return {"name": settings.APP_TITLE, "version": settings.APP_VERSION}


@app.get("/__version__", tags=["health"])
def version_meta():
    return {"app_version": settings.APP_VERSION, "started_at": APP_STARTED_TS}


@app.get("/health", tags=["health"])
def health():
    if _store_is_up():
        return {"status": "ok", "db": True}
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "error", "db": False},
    )


@app.get("/health/uptime", tags=["health"])
def health_uptime():
    return {"uptime_seconds": round(time.monotonic() - APP_STARTED_MONO, 3), "started_at": APP_STARTED_TS}


# --- Routers ---
app.include_router(products_router)
