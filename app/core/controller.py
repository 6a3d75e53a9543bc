"""
Clip form controller.

Drives one interaction with the page: local validation, the request to the
clipping server, the follow-up download and the hand-off of the file to the
saver. The controller never raises; every failure ends up in ``state``.
"""

from contextlib import contextmanager
from typing import Any, Awaitable, Callable, Iterator, List, Optional, Protocol

from fastapi import Response
from pydantic import ValidationError as PydanticValidationError

from app.config import logger
from app.core.clip_client import to_absolute_url
from app.core.download import (
    DOWNLOAD_FILENAME,
    DownloadError,
    DownloadedVideo,
    build_download_response,
)
from app.core.security import (
    ValidationError,
    is_form_valid,
    time_format_error,
    validate_clip_url,
)
from app.schemas import ClipResponse, Phase, UIState

GENERIC_CLIP_ERROR = "Something went wrong."
GENERIC_DOWNLOAD_ERROR = "Failed to download video"

ClipRelay = Callable[[str, str, str], Awaitable[Any]]
DownloadRelay = Callable[[str], Awaitable[DownloadedVideo]]


class FileSaver(Protocol):
    def stage(self, video: DownloadedVideo, filename: str) -> Any: ...

    def trigger(self, staged: Any) -> None: ...

    def release(self, staged: Any) -> None: ...


class AttachmentSaver:
    """Hands the clip back to the browser as an attachment response."""

    def __init__(self) -> None:
        self.response: Optional[Response] = None
        self._staged: List[Response] = []

    def stage(self, video: DownloadedVideo, filename: str) -> Response:
        staged = build_download_response(video, filename)
        self._staged.append(staged)
        return staged

    def trigger(self, staged: Response) -> None:
        self.response = staged

    def release(self, staged: Response) -> None:
        self._staged.remove(staged)

    @property
    def pending(self) -> int:
        return len(self._staged)


class ClipController:
    def __init__(self, clip_relay: ClipRelay, download_relay: DownloadRelay, saver: FileSaver):
        self._clip_relay = clip_relay
        self._download_relay = download_relay
        self._saver = saver
        self.state = UIState()
        self.transitions: List[Phase] = [Phase.IDLE]

    # -- field edits --------------------------------------------------------

    def set_url(self, value: str) -> None:
        self.state.tweet_url = value

    def set_start(self, value: str) -> None:
        self.state.start = value
        self.state.time_error = time_format_error(value, "Start time")

    def set_end(self, value: str) -> None:
        self.state.end = value
        self.state.time_error = time_format_error(value, "End time")

    @property
    def can_submit(self) -> bool:
        return not self.state.loading and is_form_valid(
            self.state.tweet_url, self.state.start, self.state.end
        )

    # -- submission ---------------------------------------------------------

    async def submit(self) -> UIState:
        state = self.state
        if not self.can_submit:
            # A submission already outstanding is left alone.
            if not state.loading:
                state.error = self._blocking_error()
            return state

        state.loading = True
        state.error = ""
        state.download_url = ""
        self._enter(Phase.SUBMITTING)
        try:
            await self._run()
        finally:
            state.loading = False
        return state

    def _blocking_error(self) -> str:
        try:
            validate_clip_url(self.state.tweet_url)
        except ValidationError as e:
            return e.message
        return time_format_error(self.state.start, "Start time") or time_format_error(self.state.end, "End time")

    async def _run(self) -> None:
        state = self.state
        try:
            reply = await self._clip_relay(state.tweet_url, state.start, state.end)
        except Exception as e:
            logger.exception("Clip request failed: %s", e)
            self._fail(GENERIC_CLIP_ERROR)
            return

        try:
            clip = ClipResponse.model_validate(reply)
        except PydanticValidationError:
            clip = ClipResponse()
        if not clip.download_url:
            logger.warning("Clipping server returned no download URL: %r", reply)
            self._fail(clip.error or GENERIC_CLIP_ERROR)
            return

        state.download_url = to_absolute_url(clip.download_url)
        self._enter(Phase.AWAITING_DOWNLOAD)

        try:
            video = await self._download_relay(state.download_url)
        except DownloadError as e:
            self._fail(e.message or GENERIC_DOWNLOAD_ERROR)
            return
        except Exception as e:
            logger.exception("Download error: %s", e)
            self._fail(GENERIC_DOWNLOAD_ERROR)
            return

        try:
            with self._staged(video) as staged:
                self._saver.trigger(staged)
        except Exception as e:
            logger.exception("Saving the clip failed: %s", e)
            self._fail(GENERIC_DOWNLOAD_ERROR)
            return

        state.tweet_url = ""
        state.start = ""
        state.end = ""
        self._enter(Phase.IDLE)

    @contextmanager
    def _staged(self, video: DownloadedVideo) -> Iterator[Any]:
        staged = self._saver.stage(video, DOWNLOAD_FILENAME)
        try:
            yield staged
        finally:
            self._saver.release(staged)

    def _fail(self, message: str) -> None:
        self.state.error = message
        self._enter(Phase.ERROR)

    def _enter(self, phase: Phase) -> None:
        logger.debug("Clip form: %s -> %s", self.state.phase.value, phase.value)
        self.state.phase = phase
        self.transitions.append(phase)
