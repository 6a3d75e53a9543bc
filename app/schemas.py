"""
Pydantic models for request/response validation.

Field names follow the clipping server's camelCase contract through aliases;
Python code uses the snake_case attribute names.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# -----------------------------------------------------------------------------
# Base Models
# -----------------------------------------------------------------------------

class BaseSchema(BaseModel):
    """Base schema with common configuration."""
    model_config = ConfigDict(populate_by_name=True)


# -----------------------------------------------------------------------------
# Clip Flow
# -----------------------------------------------------------------------------

class ClipRequest(BaseSchema):
    """A post URL and an optional trim range."""
    tweet_url: str = Field(default="", alias="tweetUrl")
    start: str = Field(default="", description="HH:MM:SS, optional")
    end: str = Field(default="", description="HH:MM:SS, optional")


class ClipResponse(BaseSchema):
    """Reply from the clipping server; its schema is owned upstream."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    download_url: Optional[str] = Field(default=None, alias="downloadUrl")
    error: Optional[str] = None


class DownloadRequest(BaseSchema):
    """Body of the download proxy."""
    download_url: str = Field(default="", alias="downloadUrl")


class Phase(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    AWAITING_DOWNLOAD = "awaiting-download"
    ERROR = "error"


class UIState(BaseModel):
    """Everything the page shows for one interaction."""
    model_config = ConfigDict(populate_by_name=True)

    tweet_url: str = Field(default="", alias="tweetUrl")
    start: str = ""
    end: str = ""
    error: str = ""
    time_error: str = Field(default="", alias="timeError")
    loading: bool = False
    download_url: str = Field(default="", alias="downloadUrl")
    phase: Phase = Phase.IDLE


# -----------------------------------------------------------------------------
# API Response Models
# -----------------------------------------------------------------------------

class ErrorResponse(BaseSchema):
    """Standard error response."""
    error: str
    request_id: Optional[str] = None


class ClipErrorResponse(BaseSchema):
    """Failed submission together with the state the page should render."""
    error: str
    state: UIState


class HealthResponse(BaseSchema):
    """Health check response."""
    status: str = "healthy"
    version: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
