"""
Security Headers Middleware

Adds security headers to all responses.
"""

from typing import Callable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Adds security headers to all responses.

    Headers:
    - X-Frame-Options: Prevents clickjacking
    - X-Content-Type-Options: Prevents MIME sniffing
    - Referrer-Policy: Controls referrer information
    - Strict-Transport-Security: Only when enabled, the app may run on plain HTTP
    - Content-Security-Policy: The page only talks to its own origin
    - Permissions-Policy: Restricts browser features
    - Cache-Control: Defaulted for API responses; routes may set their own
    """

    def __init__(
        self,
        app: ASGIApp,
        csp_policy: Optional[str] = None,
        hsts_max_age: int = 0,
    ):
        super().__init__(app)

        self.hsts_header = f"max-age={hsts_max_age}; includeSubDomains" if hsts_max_age else None

        # The page downloads blobs through object URLs
        self.csp_policy = csp_policy or "; ".join([
            "default-src 'self'",
            "script-src 'self'",
            "style-src 'self' 'unsafe-inline'",
            "img-src 'self' data:",
            "connect-src 'self'",
            "media-src 'self' blob:",
            "frame-ancestors 'none'",
            "base-uri 'self'",
            "form-action 'self'",
        ])

        self.permissions_policy = ", ".join([
            "camera=()",
            "geolocation=()",
            "microphone=()",
            "payment=()",
            "usb=()",
        ])

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")

        if self.hsts_header:
            response.headers.setdefault("Strict-Transport-Security", self.hsts_header)

        # CSP - skip for static files to avoid breaking them
        if not request.url.path.startswith("/static"):
            response.headers.setdefault("Content-Security-Policy", self.csp_policy)

        response.headers.setdefault("Permissions-Policy", self.permissions_policy)

        if request.url.path.startswith("/api"):
            response.headers.setdefault("Cache-Control", "no-store")

        return response
