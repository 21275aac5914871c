"""Request correlation ID middleware.

Every inbound request gets an id, taken from the client's ``X-Request-ID``
or ``X-Correlation-ID`` header or freshly generated. The id is stored in a
context variable so log records and the upstream fetch can carry it, and is
echoed back on the response.
"""

import uuid
from collections.abc import Awaitable, Callable
from contextvars import ContextVar

from aiohttp import web

# Uses contextvars for per-task propagation across concurrent requests
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


@web.middleware
async def correlation_id_middleware(
    request: web.Request, handler: Callable[[web.Request], Awaitable[web.StreamResponse]]
) -> web.StreamResponse:
    """Extract or generate a correlation ID for request tracking.

    Priority for correlation ID extraction:
    1. X-Request-ID from client
    2. X-Correlation-ID from client
    3. Generate new UUID

    Args:
        request: aiohttp request object
        handler: Next handler in middleware chain

    Returns:
        Response with correlation ID added to headers
    """
    correlation_id = (
        request.headers.get("X-Request-ID")
        or request.headers.get("X-Correlation-ID")
        or str(uuid.uuid4())
    )

    request_id_var.set(correlation_id)
    request["correlation_id"] = correlation_id

    try:
        response = await handler(request)
    except web.HTTPException as exc:
        exc.headers["X-Request-ID"] = correlation_id
        raise

    response.headers["X-Request-ID"] = correlation_id
    return response


def get_request_id() -> str:
    """Get current request correlation ID from context.

    Returns:
        Current request correlation ID, or "no-request-id" if not set
    """
    request_id = request_id_var.get()
    return request_id if request_id else "no-request-id"
