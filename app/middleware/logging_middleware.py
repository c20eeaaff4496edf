import time
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
import structlog
from uuid import uuid4

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"


def _request_fields(request: Request) -> dict:
    fields = {
        "client_ip": request.client.host if request.client else None,
        "authenticated": "authorization" in request.headers,
    }
    # Filters and ids travel in the query string on every products route.
    if request.query_params:
        fields["query_params"] = dict(request.query_params)
    if request.headers.get("content-length"):
        fields["content_length"] = request.headers["content-length"]
    return fields


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request once on arrival and once on completion."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id
        log = logger.bind(request_id=request_id, method=request.method, path=request.url.path)

        log.info("Request received", **_request_fields(request))
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            log.error("Request failed", error=str(e), duration=round(time.perf_counter() - started, 4))
            raise

        duration = round(time.perf_counter() - started, 4)
        level = log.warning if response.status_code >= 400 else log.info
        level("Request completed", status_code=response.status_code, duration=duration)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class StructlogMiddleware(BaseHTTPMiddleware):
    """Binds request context so service and DAO logs carry the request id."""

    async def dispatch(self, request: Request, call_next):
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=getattr(request.state, "request_id", str(uuid4())),
            path=request.url.path,
            method=request.method,
        )
        return await call_next(request)
