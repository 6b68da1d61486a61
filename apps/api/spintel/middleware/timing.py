"""
Request timing and structured completion logging.
Expects RequestIdMiddleware to run first so request.state.request_id is set.
"""
import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from spintel.config import load_settings
from spintel.utils.observability import log_event

logger = logging.getLogger(__name__)


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def _organisation_id(request: Request) -> str | None:
    path_params = request.scope.get("path_params") or {}
    return path_params.get("organisation_id") or request.query_params.get("organisation_id")


class TimingMiddleware(BaseHTTPMiddleware):
    """Log request completion as JSON; WARNING level and slow=true past the threshold."""

    def __init__(self, app, slow_threshold_ms: int | None = None):
        super().__init__(app)
        if slow_threshold_ms is None:
            slow_threshold_ms = load_settings().slow_threshold_ms
        self.slow_threshold_ms = slow_threshold_ms

    async def dispatch(self, request: Request, call_next) -> Response:
        t0 = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            elapsed_ms = round((time.perf_counter() - t0) * 1000)
            log_event(
                logger,
                "request_error",
                level=logging.ERROR,
                request_id=getattr(request.state, "request_id", None),
                method=request.method,
                path=request.url.path,
                status_code=500,
                elapsed_ms=elapsed_ms,
                client_ip=_client_ip(request),
                error_type=type(e).__name__,
            )
            raise
        elapsed_ms = round((time.perf_counter() - t0) * 1000)
        fields = {
            "request_id": getattr(request.state, "request_id", None),
            "method": request.method,
            "path": request.url.path,
            "organisation_id": _organisation_id(request),
            "status_code": response.status_code,
            "elapsed_ms": elapsed_ms,
            "client_ip": _client_ip(request),
        }
        level = logging.INFO
        if elapsed_ms >= self.slow_threshold_ms:
            fields["slow"] = True
            level = logging.WARNING
        log_event(logger, "request_complete", level=level, **fields)
        return response
