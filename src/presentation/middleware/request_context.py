"""Request context middleware: request id and caller identity for every log line."""

import uuid
from contextvars import ContextVar
from typing import Optional

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def get_request_id() -> Optional[str]:
    """Get the current request ID from context."""
    return request_id_var.get()


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Sets up the per-request logging context.

    The request ID is taken from X-Request-ID (or generated) and echoed
    back on the response. It is bound into structlog's context together
    with the actor headers, so service-level events such as
    installment_adjusted can be traced to the request and the caller.
    """

    HEADER_NAME = "X-Request-ID"
    ACTOR_HEADERS = {
        "X-Actor-Id": "actor_id",
        "X-Actor-Role": "actor_role",
        "X-Branch-Id": "branch_id",
    }

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(self.HEADER_NAME) or str(uuid.uuid4())

        token = request_id_var.set(request_id)
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            **{
                key: request.headers[header]
                for header, key in self.ACTOR_HEADERS.items()
                if request.headers.get(header)
            },
        )

        try:
            response = await call_next(request)
            response.headers[self.HEADER_NAME] = request_id
            return response
        finally:
            structlog.contextvars.clear_contextvars()
            request_id_var.reset(token)
