"""
Input Validation Module

Validates the clip form: the Twitter/X post URL and the optional
HH:MM:SS trim range.
"""

import re
from typing import Optional

from app.core.security.constants import (
    ALLOWED_VIDEO_HOSTS,
    TIME_FORMAT_EXAMPLE,
    TIME_FORMAT_PATTERN,
)

_TIME_RE = re.compile(TIME_FORMAT_PATTERN)


class ValidationError(Exception):
    """Raised when input validation fails."""
    def __init__(self, message: str, field: Optional[str] = None):
        self.message = message
        self.field = field
        super().__init__(message)


def validate_time_format(value: Optional[str]) -> bool:
    """
    Check an optional HH:MM:SS timestamp.

    Blank input is valid since both ends of the trim range are optional.
    """
    if not value or not value.strip():
        return True
    return _TIME_RE.fullmatch(value) is not None


def time_format_error(value: Optional[str], label: str) -> str:
    """Field-level message for a malformed timestamp, empty when it is fine."""
    if validate_time_format(value):
        return ""
    return f"{label} must be in HH:MM:SS format (e.g., {TIME_FORMAT_EXAMPLE})"


def _has_allowed_host(url: str) -> bool:
    return any(host in url for host in ALLOWED_VIDEO_HOSTS)


def validate_clip_url(url: Optional[str]) -> str:
    """
    Validate the post URL.

    Raises:
        ValidationError: If the URL is blank or not a Twitter/X link.

    Returns:
        The URL, unchanged.
    """
    if not url or not url.strip():
        raise ValidationError("Please enter a Twitter URL", field="tweetUrl")

    if not _has_allowed_host(url):
        raise ValidationError("Please enter a valid Twitter/X URL", field="tweetUrl")

    return url


def is_form_valid(url: Optional[str], start: Optional[str], end: Optional[str]) -> bool:
    """Advisory check gating the submit button; the clipping server has the final say."""
    if not url or not url.strip():
        return False
    if not _has_allowed_host(url):
        return False
    if start and start.strip() and not validate_time_format(start):
        return False
    if end and end.strip() and not validate_time_format(end):
        return False
    return True
