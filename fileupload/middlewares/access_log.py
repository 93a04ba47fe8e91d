"""Request access logging middleware."""

import time

from robyn import Request, Response

from fileupload.core.logger import LogIcon, logger
from fileupload.middlewares.base import BaseMiddleware

REQUEST_START_HEADER = "x-request-start-ns"


class AccessLogMiddleware(BaseMiddleware):
    """Logs client address, method and path of every request, then its status and duration.

    The start time travels with the request as a header, since before and
    after hooks do not share a context.
    """

    def before(self, request: Request) -> Request:
        request.headers.set(REQUEST_START_HEADER, str(time.perf_counter_ns()))
        logger.info(
            "Request received",
            icon=LogIcon.NETWORK,
            ip=request.ip_addr,
            method=request.method,
            path=request.url.path,
        )
        return request

    def after(self, request: Request, response: Response) -> Response:
        logger.info(
            "Request completed",
            icon=LogIcon.NETWORK,
            ip=request.ip_addr,
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=elapsed_ms(request),
        )
        return response


def elapsed_ms(request: Request) -> float | None:
    """Milliseconds since ``before`` stamped the request, None when it was not stamped."""
    try:
        started = int(request.headers.get(REQUEST_START_HEADER))
    except (TypeError, ValueError):
        return None
    return round((time.perf_counter_ns() - started) / 1_000_000, 3)
