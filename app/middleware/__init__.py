"""
HTTP middleware for ClipX: request IDs, request logs, security headers and
a last-resort JSON error for exceptions that escape a route.
"""

from app.middleware.error_sanitization import ErrorSanitizationMiddleware
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import RequestIDMiddleware
from app.middleware.security_headers import SecurityHeadersMiddleware

__all__ = [
    "ErrorSanitizationMiddleware",
    "RequestIDMiddleware",
    "RequestLoggingMiddleware",
    "SecurityHeadersMiddleware",
]
