"""
Security Utilities

Request ID tracking and client identification for request logs.
"""

import re
import secrets

from fastapi import Request

from app.core.security.constants import REQUEST_ID_HEADER

_REQUEST_ID_RE = re.compile(r"^[a-zA-Z0-9_-]+$")


def generate_request_id() -> str:
    """Generate a unique request ID."""
    return secrets.token_hex(16)


def get_request_id(request: Request) -> str:
    """Get or generate request ID from request."""
    request_id = request.headers.get(REQUEST_ID_HEADER)
    if request_id and len(request_id) <= 64 and _REQUEST_ID_RE.match(request_id):
        return request_id
    return generate_request_id()


def get_client_ip(request: Request) -> str:
    """First hop of X-Forwarded-For, else the socket peer."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"
