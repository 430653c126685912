"""Optional render backend: download just a moment's section as a real file.

Rendering is costly optional infrastructure. The clip resolver only calls it
when ``is_available()`` is true and falls back to an embed reference on any
failure, so nothing here is allowed to be fatal to a request.
"""

import asyncio
import logging
import shutil
import threading
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

import yt_dlp
from yt_dlp.utils import DownloadCancelled

from models.moment import MomentRecord, VideoRef
from services.video_ref import watch_url
from utils.errors import RenderError
from utils.user_agents import get_random_user_agent

logger = logging.getLogger(__name__)

# Format fallback strategies, tried in sequence if the preferred one fails
CLIP_FORMAT_FALLBACKS = [
    "bestvideo[height<=1080]+bestaudio/best",  # Preferred: 1080p with audio merge
    "best[height<=1080]",  # Fallback 1: Pre-merged 1080p
    "best",  # Fallback 2: Any available format
]


class RenderBackend(ABC):
    """Produces a media file for a moment."""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the backend can be used for this process at all."""

    @abstractmethod
    async def render(self, video_ref: VideoRef, moment: MomentRecord) -> str:
        """Render the moment and return the output file path.

        Raises:
            RenderError: When no file could be produced
        """


def validate_rendered_file(file_path: Path, min_size_kb: int = 1) -> bool:
    """Check the output exists and is not an empty stub yt-dlp reported as success."""
    if not file_path.exists():
        logger.warning(f"File does not exist: {file_path}")
        return False

    size_kb = file_path.stat().st_size / 1024
    if size_kb < min_size_kb:
        logger.warning(f"File too small ({size_kb:.2f} KB): {file_path}")
        return False

    return True


def detect_sabr_error(error_message: str) -> bool:
    """Detect YouTube SABR streaming errors, which format changes won't fix."""
    sabr_indicators = [
        "sabr",
        "forcing sabr",
        "web client https formats",
        "formats have been skipped",
    ]
    error_lower = str(error_message).lower()
    return any(indicator in error_lower for indicator in sabr_indicators)


class YtDlpRenderBackend(RenderBackend):
    """Downloads only the moment's time range with yt-dlp and ffmpeg."""

    def __init__(
        self,
        output_dir: str,
        enabled: bool = True,
        format_list: Optional[List[str]] = None,
        cookies_file: Optional[str] = None,
    ):
        """Initialize render backend.

        Args:
            output_dir: Directory for rendered clips
            enabled: Master switch from configuration
            format_list: Format selectors tried in order
            cookies_file: Optional cookie file for yt-dlp
        """
        self.output_dir = Path(output_dir)
        self.enabled = enabled
        self.format_list = format_list or list(CLIP_FORMAT_FALLBACKS)
        self.cookies_file = cookies_file

    @classmethod
    def from_config(cls, config: dict) -> "YtDlpRenderBackend":
        return cls(
            output_dir=config["clips_output_dir"],
            enabled=config.get("render_enabled", False),
            cookies_file=config.get("ytdlp_cookies_file"),
        )

    def is_available(self) -> bool:
        # Section downloads with keyframe cuts need ffmpeg
        return self.enabled and shutil.which("ffmpeg") is not None

    def _build_options(
        self, fmt: str, moment: MomentRecord, basename: str, cancelled: threading.Event
    ) -> dict:
        start, end = moment.start_seconds, moment.end_seconds

        def download_ranges_func(info_dict, ydl):
            return [{"start_time": start, "end_time": end}]

        def cancel_hook(progress):
            if cancelled.is_set():
                raise DownloadCancelled("Render cancelled")

        ydl_opts = {
            "format": fmt,
            "download_ranges": download_ranges_func,
            "force_keyframes_at_cuts": True,
            "outtmpl": str(self.output_dir / f"{basename}.%(ext)s"),
            "postprocessors": [
                {
                    "key": "FFmpegVideoConvertor",
                    "preferedformat": "mp4",
                }
            ],
            "progress_hooks": [cancel_hook],
            "quiet": True,
            "no_warnings": True,
            "no_progress": True,
            "http_headers": {
                "User-Agent": get_random_user_agent(),
            },
        }
        if self.cookies_file and Path(self.cookies_file).exists():
            ydl_opts["cookiefile"] = self.cookies_file
        return ydl_opts

    def _discard(self, basename: str) -> None:
        for leftover in self.output_dir.glob(f"{basename}.*"):
            leftover.unlink(missing_ok=True)

    def _render_blocking(
        self, video_ref: VideoRef, moment: MomentRecord, cancelled: Optional[threading.Event] = None
    ) -> str:
        cancelled = cancelled or threading.Event()
        self.output_dir.mkdir(parents=True, exist_ok=True)
        basename = f"tiktok-clip-{moment.moment_id}-{int(time.time() * 1000)}"
        url = watch_url(video_ref.video_id)
        last_error: Optional[Exception] = None

        for format_idx, fmt in enumerate(self.format_list):
            if cancelled.is_set():
                break
            if format_idx > 0:
                logger.info(f"Trying fallback format {format_idx}: {fmt}")

            try:
                with yt_dlp.YoutubeDL(self._build_options(fmt, moment, basename, cancelled)) as ydl:
                    ydl.download([url])
            except Exception as e:
                last_error = e
                if detect_sabr_error(str(e)):
                    logger.warning("SABR streaming error detected, skipping remaining formats")
                    break
                logger.info(f"Format {fmt} failed: {e}")
                continue

            if cancelled.is_set():
                break

            clip_files = sorted(self.output_dir.glob(f"{basename}.*"))
            if clip_files and validate_rendered_file(clip_files[0]):
                logger.info(f"Rendered clip: {clip_files[0].name}")
                return str(clip_files[0])

            self._discard(basename)
            logger.warning(f"Clip missing or invalid after download with format {fmt}")

        if cancelled.is_set():
            self._discard(basename)
            logger.info(f"Render of moment {moment.moment_id} cancelled, partial output removed")
            raise RenderError(f"Render of moment {moment.moment_id} was cancelled", video_ref.video_id)

        raise RenderError(
            f"Failed to render moment {moment.moment_id}: {last_error or 'no valid output'}",
            video_ref.video_id,
        )

    async def render(self, video_ref: VideoRef, moment: MomentRecord) -> str:
        if not self.is_available():
            raise RenderError("Render backend is not available", video_ref.video_id)

        # The worker thread cannot be interrupted; it polls this flag instead
        cancelled = threading.Event()
        try:
            return await asyncio.to_thread(self._render_blocking, video_ref, moment, cancelled)
        except asyncio.CancelledError:
            cancelled.set()
            raise
