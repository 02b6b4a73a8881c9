"""
Correlation ID Middleware

Tags each request with a correlation ID so every log line it produces,
including those from collector work it triggers, can be traced together.
"""

import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from core.logging import set_correlation_id


class CorrelationMiddleware(BaseHTTPMiddleware):
    """
    - Reads X-Correlation-ID from the incoming request, or generates one
    - Sets it in the logging context
    - Echoes it on the response
    """

    HEADER_NAME = "X-Correlation-ID"

    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = request.headers.get(self.HEADER_NAME) or str(uuid.uuid4())
        set_correlation_id(correlation_id)

        response = await call_next(request)
        response.headers[self.HEADER_NAME] = correlation_id
        return response
