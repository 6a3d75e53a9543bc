"""
Security Constants

Centralized constants for security module.
"""

# Substrings that mark a URL as a Twitter/X post
ALLOWED_VIDEO_HOSTS = ("twitter.com", "x.com")

# HH:MM:SS with optional leading zeros, hours 0-23
TIME_FORMAT_PATTERN = r"^([0-1]?[0-9]|2[0-3]):([0-5]?[0-9]):([0-5]?[0-9])$"
TIME_FORMAT_EXAMPLE = "00:01:30"

# Request ID header
REQUEST_ID_HEADER = "X-Request-ID"
