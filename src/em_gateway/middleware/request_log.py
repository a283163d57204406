"""Request logging middleware.

Assigns each request an id (or adopts the caller's `X-Request-ID` when it is
well formed), stores it on request.state for the ApiResponse envelope, echoes
it back in the response header and logs one line per request:

    INFO [POST] /api/v1/marketplaces/Gallery/listings → 201 (23ms) req_a1b2c3d4e5f6

Server errors are logged at WARNING so they stand out from client errors.
"""

import logging
import re
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from src.em_common.response import new_request_id

logger = logging.getLogger("em.request")

REQUEST_ID_HEADER = "X-Request-ID"
_ACCEPTED_ID = re.compile(r"^[A-Za-z0-9_\-]{8,64}$")


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        supplied = request.headers.get(REQUEST_ID_HEADER, "")
        request_id = supplied if _ACCEPTED_ID.match(supplied) else new_request_id()
        request.state.request_id = request_id

        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        response.headers[REQUEST_ID_HEADER] = request_id

        logger.log(
            logging.WARNING if response.status_code >= 500 else logging.INFO,
            "[%s] %s → %d (%.0fms) %s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request_id,
        )
        return response
