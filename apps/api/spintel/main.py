import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from spintel.config import debug_enabled, load_settings
from spintel.db import get_connection, get_engine
from spintel.errors import ReportError
from spintel.middleware.request_id import RequestIdMiddleware
from spintel.middleware.timing import TimingMiddleware
from spintel.routers import (
    consultant_home,
    export,
    home_screen_graph,
    organisation,
    production_charts,
    production_summary,
    rf_charts,
    rf_summary,
    ukg_charts,
    ukg_summary,
    yarn_charts,
    yarn_summary,
)
from spintel.utils.observability import configure_logging, log_event

settings = load_settings()
configure_logging(settings.log_level)
logger = logging.getLogger("spintel")

_start_time = time.monotonic()

app = FastAPI(title="Spintel Reporting API")
app.include_router(yarn_charts.router)
app.include_router(rf_charts.router)
app.include_router(production_charts.router)
app.include_router(ukg_charts.router)
app.include_router(yarn_summary.router)
app.include_router(rf_summary.router)
app.include_router(production_summary.router)
app.include_router(ukg_summary.router)
app.include_router(consultant_home.router)
app.include_router(home_screen_graph.router)
app.include_router(export.router)
app.include_router(organisation.router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(TimingMiddleware)
app.add_middleware(RequestIdMiddleware)  # outermost, runs first


@app.exception_handler(ReportError)
async def report_error_handler(request: Request, exc: ReportError) -> JSONResponse:
    log_event(
        logger,
        "report_error",
        level=logging.WARNING if exc.status_code < 500 else logging.ERROR,
        request_id=getattr(request.state, "request_id", None),
        path=request.url.path,
        status_code=exc.status_code,
        error_type=type(exc).__name__,
        message=exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p not in ("query", "path", "body"))
    message = f"Invalid {field}: {first.get('msg', 'invalid value')}" if field else "Invalid request"
    log_event(
        logger,
        "request_invalid",
        level=logging.WARNING,
        request_id=getattr(request.state, "request_id", None),
        path=request.url.path,
        message=message,
    )
    return JSONResponse(status_code=400, content={"error": message})


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/internal/metrics")
def internal_metrics():
    """Process metrics. Guarded by DEBUG=true."""
    if not debug_enabled():
        return {"error": "disabled", "message": "Set DEBUG=true to enable"}
    engine = get_engine()
    return {
        "uptime_seconds": round(time.monotonic() - _start_time, 2),
        "database_configured": engine is not None,
        "db_pool": engine.pool.status() if engine is not None else None,
        "routes": len(app.routes),
    }


@app.get("/db-check")
def db_check():
    engine = get_engine()
    if engine is None:
        return {"db": "error", "message": "DATABASE_URL not set"}
    try:
        with get_connection() as conn:
            if conn is None:
                return {"db": "error", "message": "DATABASE_URL not set"}
            conn.execute(text("SELECT 1"))
        return {"db": "ok"}
    except Exception as e:
        log_event(logger, "db_check_failed", level=logging.ERROR, error_type=type(e).__name__, error=str(e))
        return {"db": "error", "message": "database unreachable"}
