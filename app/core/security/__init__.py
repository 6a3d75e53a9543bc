"""
Security module for ClipX.

Provides:
- Input validation for the clip form
- Request ID tracking
- Security utilities
"""

from app.core.security.constants import (
    ALLOWED_VIDEO_HOSTS,
    REQUEST_ID_HEADER,
    TIME_FORMAT_PATTERN,
)
from app.core.security.validation import (
    ValidationError,
    is_form_valid,
    time_format_error,
    validate_clip_url,
    validate_time_format,
)
from app.core.security.utils import (
    generate_request_id,
    get_client_ip,
    get_request_id,
)

__all__ = [
    # Constants
    "ALLOWED_VIDEO_HOSTS",
    "REQUEST_ID_HEADER",
    "TIME_FORMAT_PATTERN",
    # Validation
    "ValidationError",
    "is_form_valid",
    "time_format_error",
    "validate_clip_url",
    "validate_time_format",
    # Utils
    "generate_request_id",
    "get_client_ip",
    "get_request_id",
]
