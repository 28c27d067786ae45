"""Request/response logging middleware with timing."""

import time
from typing import Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from src.core.metrics import record_http_request

logger = structlog.get_logger(__name__)

# Probe and scrape endpoints, counted in metrics but not logged
QUIET_PATHS = frozenset({"/metrics", "/v1/health"})


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs request start, completion, and duration, and feeds the HTTP
    request metrics. The request ID and actor come from the structlog
    context bound by RequestContextMiddleware.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        method = request.method
        path = request.url.path
        quiet = path in QUIET_PATHS

        log = logger.bind(method=method, path=path)

        if not quiet:
            query = str(request.query_params) if request.query_params else None
            log.info("request_started", query=query)

        try:
            response = await call_next(request)
        except Exception as e:
            duration = time.perf_counter() - start_time
            log.error(
                "request_failed",
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=round(duration * 1000, 2),
            )
            record_http_request(method, self._endpoint(request), 500, duration)
            raise

        duration = time.perf_counter() - start_time
        if not quiet:
            log.info(
                "request_completed",
                status_code=response.status_code,
                duration_ms=round(duration * 1000, 2),
            )
        record_http_request(method, self._endpoint(request), response.status_code, duration)

        return response

    @staticmethod
    def _endpoint(request: Request) -> str:
        """Route template rather than raw path, to keep label cardinality bounded."""
        route = request.scope.get("route")
        return endpoint_label(request.url.path, getattr(route, "path", None))


def endpoint_label(path: str, route_path: str | None) -> str:
    """
    Full route template for a request path.

    Depending on the FastAPI version, the matched route's path is either
    the full template or relative to the router it was included from
    (`/orders/{order_id}/plan` for `/v1/orders/.../plan`). The segments
    of `path` not covered by the template are the router prefix.
    """
    if not route_path:
        return path

    segments = path.rstrip("/").split("/")
    depth = route_path.rstrip("/").count("/")
    prefix = "/".join(segments[: len(segments) - depth])
    return prefix + route_path
