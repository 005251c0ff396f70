"""Request correlation and access logging for the estimator API."""

import re
import time
import uuid
from collections.abc import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from src.core.logging import get_logger, request_id_ctx, tax_year_ctx

RequestResponseEndpoint = Callable[[Request], Awaitable[Response]]

REQUEST_ID_HEADER = "X-Request-ID"

# Caller-supplied ids are echoed into logs and headers, so keep them tame.
_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._:-]{1,64}$")

logger = get_logger(__name__)


def resolve_request_id(header_value: str | None) -> str:
    """Return the caller's request id when well-formed, otherwise a new one."""
    if header_value and _REQUEST_ID_PATTERN.fullmatch(header_value):
        return header_value
    return uuid.uuid4().hex


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind a request id for the lifetime of each request.

    The id is set in the logging context, echoed in the X-Request-ID response
    header, and one access event with status and duration is logged per
    request. Context is cleared afterwards so nothing leaks between requests
    served by the same worker.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request_token = request_id_ctx.set(request_id)
        year_token = tax_year_ctx.set(None)
        started = time.perf_counter()

        try:
            response = await call_next(request)
            logger.info(
                "request_completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
        finally:
            tax_year_ctx.reset(year_token)
            request_id_ctx.reset(request_token)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
