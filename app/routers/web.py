import json
from functools import partial

import httpx
from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import FileResponse, JSONResponse
from pydantic import ValidationError as PydanticValidationError

from app.config import STATIC_DIR, logger
from app.core.clip_client import request_clip
from app.core.http_client import get_http_client
from app.core.controller import AttachmentSaver, ClipController
from app.core.download import DownloadError, build_download_response, fetch_video
from app.schemas import ClipErrorResponse, ClipRequest, DownloadRequest, ErrorResponse, Phase

router = APIRouter()


# -----------------------------------------------------------------------------
# Page
# -----------------------------------------------------------------------------

@router.get("/", include_in_schema=False)
async def index() -> FileResponse:
    """The clip form."""
    return FileResponse(STATIC_DIR / "index.html", media_type="text/html")


# -----------------------------------------------------------------------------
# Clip Endpoint
# -----------------------------------------------------------------------------

@router.post(
    "/api/clip",
    responses={400: {"model": ClipErrorResponse}, 502: {"model": ClipErrorResponse}},
)
async def clip(
    payload: ClipRequest,
    client: httpx.AsyncClient = Depends(get_http_client),
) -> Response:
    """Clip a post and return the file, or the form state explaining why not."""
    saver = AttachmentSaver()
    controller = ClipController(
        clip_relay=partial(request_clip, client=client),
        download_relay=partial(fetch_video, client=client),
        saver=saver,
    )
    controller.set_url(payload.tweet_url)
    controller.set_start(payload.start)
    controller.set_end(payload.end)

    state = await controller.submit()

    if saver.response is not None:
        return saver.response

    status_code = status.HTTP_502_BAD_GATEWAY if state.phase == Phase.ERROR else status.HTTP_400_BAD_REQUEST
    body = ClipErrorResponse(error=state.error, state=state)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", by_alias=True))


# -----------------------------------------------------------------------------
# Download Proxy
# -----------------------------------------------------------------------------

async def _read_download_request(request: Request) -> DownloadRequest:
    raw = await request.body()
    try:
        data = json.loads(raw) if raw else {}
        return DownloadRequest.model_validate(data)
    except (ValueError, PydanticValidationError):
        logger.debug("Unreadable download request body")
        return DownloadRequest()


@router.post(
    "/api/download",
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def download(
    request: Request,
    client: httpx.AsyncClient = Depends(get_http_client),
) -> Response:
    """Fetch a finished clip and serve it as ``clipx-video.mp4``."""
    payload = await _read_download_request(request)
    try:
        video = await fetch_video(payload.download_url, client=client)
        return build_download_response(video)
    except DownloadError as e:
        return JSONResponse(status_code=e.status_code, content={"error": e.message})
    except Exception as e:
        logger.exception("Download error: %s", e)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )
