"""
Download relay.

Fetches a finished clip from the clipping server and re-serves it as a file
download. The whole body is buffered before it is re-emitted: no range
requests, no streaming.
"""

from dataclasses import dataclass
from typing import Optional

import httpx
from fastapi import Response, status

from app.config import logger
from app.core.http_client import new_http_client

DEFAULT_VIDEO_MEDIA_TYPE = "video/mp4"
DOWNLOAD_FILENAME = "clipx-video.mp4"


class DownloadError(Exception):
    """Raised when the clip cannot be relayed; ``message`` is safe to show."""
    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


@dataclass
class DownloadedVideo:
    content: bytes
    media_type: str = DEFAULT_VIDEO_MEDIA_TYPE

    @property
    def size(self) -> int:
        return len(self.content)


async def fetch_video(url: str, client: Optional[httpx.AsyncClient] = None) -> DownloadedVideo:
    """
    GET ``url`` and buffer the body.

    Raises:
        DownloadError: 400 for a blank URL (nothing is fetched), 500 with a
            fixed message for any upstream status or transport failure.
    """
    if not url or not url.strip():
        raise DownloadError("Download URL is required", status.HTTP_400_BAD_REQUEST)

    try:
        if client is None:
            async with new_http_client() as own_client:
                upstream = await own_client.get(url)
        else:
            upstream = await client.get(url)
    except Exception as exc:
        logger.exception("Download error for %s: %s", url, exc)
        raise DownloadError("Internal server error") from exc

    if not upstream.is_success:
        logger.warning("Upstream returned %d for %s", upstream.status_code, url)
        raise DownloadError("Failed to fetch video")

    media_type = upstream.headers.get("content-type") or DEFAULT_VIDEO_MEDIA_TYPE
    video = DownloadedVideo(content=upstream.content, media_type=media_type)
    logger.info("Fetched %d bytes (%s) from %s", video.size, video.media_type, url)
    return video


def attachment_headers(filename: str, media_type: str, size: int) -> dict[str, str]:
    return {
        "Content-Type": media_type,
        "Content-Disposition": f'attachment; filename="{filename}"',
        "Content-Length": str(size),
        "Cache-Control": "no-cache",
    }


def build_download_response(video: DownloadedVideo, filename: str = DOWNLOAD_FILENAME) -> Response:
    """Wrap a buffered clip in a response that forces a file download."""
    return Response(
        content=video.content,
        status_code=status.HTTP_200_OK,
        headers=attachment_headers(filename, video.media_type, video.size),
    )
