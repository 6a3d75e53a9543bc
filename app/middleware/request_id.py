"""
Request ID Middleware

Tags every request with an ID that appears in the logs and in the
X-Request-ID response header.
"""

from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.security import REQUEST_ID_HEADER, get_request_id


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Reuses a well-formed incoming X-Request-ID, otherwise mints one."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request.state.request_id = get_request_id(request)
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request.state.request_id
        return response
