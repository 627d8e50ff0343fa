"""Per-request correlation id and access log.

An inbound ``X-Request-ID`` header is reused when present, otherwise a fresh
``req_<12 hex>`` id is minted. The id is stored on ``request.state`` for the
routers' ApiResponse and echoed back in the response header. Server errors are
logged at WARNING so they stand out from normal traffic:

    INFO [POST] /api/v1/auctions/prod-1/bids -> 201 (23ms) req_a1b2c3d4e5f6
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from src.ac_common.response import new_request_id

logger = logging.getLogger("ac.request")

REQUEST_ID_HEADER = "X-Request-ID"
_MAX_INBOUND_ID_LENGTH = 64


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        inbound = request.headers.get(REQUEST_ID_HEADER, "")
        request_id = inbound if 0 < len(inbound) <= _MAX_INBOUND_ID_LENGTH else new_request_id()
        request.state.request_id = request_id

        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        response.headers[REQUEST_ID_HEADER] = request_id
        logger.log(
            logging.WARNING if response.status_code >= 500 else logging.INFO,
            "[%s] %s -> %d (%.0fms) %s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request_id,
        )
        return response


def get_request_id(request: Request) -> str:
    """Id set by RequestLogMiddleware; "req_unknown" when the middleware is absent."""
    return getattr(request.state, "request_id", "req_unknown")
