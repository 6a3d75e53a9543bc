"""
Error Sanitization Middleware

Turns exceptions that escape a route into a generic JSON error.
"""

from typing import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from app.config import logger


class ErrorSanitizationMiddleware(BaseHTTPMiddleware):
    """
    Catches unhandled exceptions so no stack trace reaches the browser.

    Routes already answer with their own ``{"error": ...}`` bodies, so
    responses that made it out of the app are passed through untouched.
    In debug mode the exception is re-raised after logging.
    """
    
    def __init__(self, app: ASGIApp, debug: bool = False):
        super().__init__(app)
        self.debug = debug
    
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            request_id = getattr(request.state, "request_id", "unknown")
            logger.exception("Unhandled exception in request %s: %s", request_id, exc)
            
            if self.debug:
                raise
            
            return JSONResponse(
                status_code=500,
                content={"error": "Internal server error", "request_id": request_id},
            )
