# app/core/middleware.py
"""Request tracing and access logging"""
import uuid
import time
import logging
from starlette.requests import Request

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"

# Polled by load balancers, not worth a log line each
QUIET_PATHS = ("/health/",)


async def correlation_id_middleware(request: Request, call_next):
    """Tag every request with a correlation id, echoing the caller's when given"""
    correlation_id = request.headers.get(CORRELATION_HEADER) or uuid.uuid4().hex
    request.state.correlation_id = correlation_id

    response = await call_next(request)
    response.headers[CORRELATION_HEADER] = correlation_id
    return response


async def request_logging_middleware(request: Request, call_next):
    """One access log line per request with status and duration"""
    if request.url.path in QUIET_PATHS:
        return await call_next(request)

    start_time = time.perf_counter()
    correlation_id = getattr(request.state, "correlation_id", "-")
    client = request.client.host if request.client else "unknown"

    response = await call_next(request)

    duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
    log = logger.warning if response.status_code >= 500 else logger.info
    log(
        f"{request.method} {request.url.path} -> {response.status_code} "
        f"in {duration_ms}ms [{correlation_id}] from {client}",
        extra={
            "correlation_id": correlation_id,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        }
    )

    return response
