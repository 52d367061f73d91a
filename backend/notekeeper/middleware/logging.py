"""
Notekeeper API - Request Logging Middleware
============================================

What:  One access log line per HTTP request on the `notekeeper.access` logger.
How:   Wraps the rest of the stack, then logs the matched route template
       (e.g. "PUT /notes/{note_id}" rather than every concrete id), the
       status, the duration and the request id.

Log lines:
    INFO     GET /notes 200 1.2ms [1f0c9a2b] from 10.0.0.4
    WARNING  POST /notes 429 0.4ms [77d0e3aa] from 10.0.0.4 (rate limited)
    ERROR    GET /notes 500 3.1ms [c2a1b0ff] from 10.0.0.4 (unhandled RuntimeError)

A handler that raises never produces a response here: the exception is
logged as a 500 and re-raised so the global error handler can answer.

Request bodies are never logged.
"""

import logging
import time
from typing import Any, Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from notekeeper.middleware.request_id import request_id_var

logger = logging.getLogger("notekeeper.access")

UNLOGGED_PATHS = {"/health"}


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


def route_label(request: Request) -> str:
    """The route template the request matched, or the raw path if none did."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


def access_fields(request: Request, status: int, duration_ms: float) -> Dict[str, Any]:
    return {
        "request_id": request_id_var.get("") or getattr(request.state, "request_id", ""),
        "method": request.method,
        "route": route_label(request),
        "status": status,
        "duration_ms": round(duration_ms, 2),
        "client_ip": request.client.host if request.client else "unknown",
    }


def log_access(fields: Dict[str, Any], note: Optional[str] = None) -> None:
    suffix = f" ({note})" if note else ""
    logger.log(
        level_for_status(fields["status"]),
        "%s %s %d %.1fms [%s] from %s%s",
        fields["method"],
        fields["route"],
        fields["status"],
        fields["duration_ms"],
        fields["request_id"],
        fields["client_ip"],
        suffix,
        extra=fields,
    )


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request with its route, status and duration in milliseconds."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in UNLOGGED_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            elapsed = (time.perf_counter() - start_time) * 1000
            log_access(access_fields(request, 500, elapsed), f"unhandled {type(exc).__name__}")
            raise

        elapsed = (time.perf_counter() - start_time) * 1000
        log_access(
            access_fields(request, response.status_code, elapsed),
            "rate limited" if response.status_code == 429 else None,
        )
        return response
