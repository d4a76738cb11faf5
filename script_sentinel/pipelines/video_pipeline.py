"""
Video Generation

Submits a Veo request, polls the long-running operation on a fixed interval
and downloads the finished clip. Polling is bounded by a timeout and can be
cancelled at any time.
"""

import asyncio
import time
import uuid
from pathlib import Path
from typing import Callable, Dict, Optional

from script_sentinel.core.config import SentinelConfig, get_config
from script_sentinel.core.exceptions import (
    ValidationError,
    VideoCancelledError,
    VideoGenerationError,
    VideoTimeoutError,
)
from script_sentinel.core.logging_config import get_logger
from script_sentinel.models.studio import VideoRequest, VideoResult

logger = get_logger("pipelines.video")

NO_DOWNLOAD_LINK_MESSAGE = "Video generation completed, but no download link was provided."


class VideoGenerator:
    """Timeout-bounded, cancellable video generation."""

    def __init__(
        self,
        client,
        config: SentinelConfig = None,
        progress_callback: Callable[[Dict], None] = None,
    ):
        self.client = client
        self.config = config or get_config()
        self._progress_callback = progress_callback
        self._cancel_event = asyncio.Event()

    def cancel(self) -> None:
        """Stop polling at the next opportunity."""
        self._cancel_event.set()
        logger.info("Video generation cancel requested")

    async def generate(
        self,
        request: VideoRequest,
        destination: Path = None,
        timeout_seconds: float = None,
    ) -> VideoResult:
        """
        Generate a video and save it locally.

        Raises:
            ValidationError: if the prompt is empty
            VideoTimeoutError: if the operation is still running after the timeout
            VideoCancelledError: if cancel() was called while polling
            VideoGenerationError: if the operation fails or yields no video
        """
        if not request.prompt or not request.prompt.strip():
            raise ValidationError("Please enter a prompt for the video.")
        if request.last_frame and not request.first_frame:
            logger.warning("Last frame supplied without a first frame; it will be ignored")

        timeout_seconds = timeout_seconds or self.config.video.timeout_seconds
        started = time.monotonic()

        operation = await self.client.start_video(request)
        logger.info(f"Video operation started: {operation.name or '(unnamed)'}")

        try:
            operation = await asyncio.wait_for(self._poll_until_done(operation, started), timeout_seconds)
        except asyncio.TimeoutError:
            logger.error(f"Video operation {operation.name} timed out after {timeout_seconds:.0f}s")
            raise VideoTimeoutError(timeout_seconds, operation.name)

        if operation.error:
            reason = operation.error
            if isinstance(reason, dict):
                reason = reason.get("message", reason)
            raise VideoGenerationError(f"Video generation failed: {reason}", {"operation": operation.name})
        if not operation.video_uri:
            raise VideoGenerationError(NO_DOWNLOAD_LINK_MESSAGE, {"operation": operation.name})

        destination = destination or self.config.video.output_dir / f"video_{uuid.uuid4().hex[:12]}.mp4"
        path = await self.client.download_video(operation.video_uri, destination)
        return VideoResult(
            path=str(path),
            uri=operation.video_uri,
            elapsed_seconds=time.monotonic() - started,
        )

    async def _poll_until_done(self, operation, started: float):
        interval = self.config.video.poll_interval_seconds
        polls = 0
        while not operation.done:
            if await self._wait_or_cancelled(interval):
                raise VideoCancelledError(operation.name)
            operation = await self.client.poll_video(operation)
            polls += 1
            self._report(polls, time.monotonic() - started, operation.done)
        return operation

    async def _wait_or_cancelled(self, interval: float) -> bool:
        """Sleep for ``interval``; True if cancel() was called meanwhile."""
        try:
            await asyncio.wait_for(self._cancel_event.wait(), interval)
        except asyncio.TimeoutError:
            return False
        return True

    def _report(self, polls: int, elapsed: float, done: bool) -> None:
        logger.debug(f"Video poll #{polls}: done={done} elapsed={elapsed:.0f}s")
        if self._progress_callback:
            self._progress_callback({
                'step': 'video',
                'polls': polls,
                'elapsed_seconds': elapsed,
                'done': done,
            })
