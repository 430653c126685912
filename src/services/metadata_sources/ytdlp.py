"""Primary metadata source: yt-dlp extraction with rotated client identity."""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import yt_dlp

from models.clip import VideoMetadata
from services.metadata_sources.base import MetadataSource
from services.video_ref import thumbnail_url, watch_url
from utils.errors import UpstreamUnavailable
from utils.user_agents import get_random_user_agent

logger = logging.getLogger(__name__)

# Configure yt-dlp logging to be silent
logging.getLogger("yt_dlp").setLevel(logging.CRITICAL)
logging.getLogger("yt_dlp.extractor").setLevel(logging.CRITICAL)


def best_thumbnail(info: dict, video_id: str) -> str:
    """Pick the largest thumbnail by area, falling back to the conventional URL."""
    thumbnails = [t for t in info.get("thumbnails") or [] if t.get("url")]
    if thumbnails:
        largest = max(thumbnails, key=lambda t: (t.get("width") or 0) * (t.get("height") or 0))
        return largest["url"]
    return info.get("thumbnail") or thumbnail_url(video_id)


class YtDlpMetadataSource(MetadataSource):
    """Extract title and thumbnail with yt-dlp, one user agent per attempt."""

    def __init__(
        self,
        max_attempts: int = 3,
        retry_delay: float = 1.0,
        timeout: Optional[float] = 8.0,
        cookies_file: Optional[str] = None,
    ):
        super().__init__(max_attempts=max_attempts, retry_delay=retry_delay, timeout=timeout)
        self.cookies_file = cookies_file

    def get_source_name(self) -> str:
        return "ytdlp"

    def _build_options(self, user_agent: str) -> dict:
        ydl_opts = {
            "quiet": True,
            "no_warnings": True,
            "skip_download": True,
            # Bounds the worker thread left behind when an attempt times out
            "socket_timeout": self.timeout or 20,
            "http_headers": {
                "User-Agent": user_agent,
            },
        }
        if self.cookies_file and Path(self.cookies_file).exists():
            ydl_opts["cookiefile"] = self.cookies_file
        return ydl_opts

    def _extract(self, video_id: str, user_agent: str) -> dict:
        try:
            with yt_dlp.YoutubeDL(self._build_options(user_agent)) as ydl:
                info = ydl.extract_info(watch_url(video_id), download=False)
        except Exception as e:
            raise UpstreamUnavailable(f"yt-dlp extraction failed: {e}", video_id) from e

        if not isinstance(info, dict):
            raise UpstreamUnavailable("yt-dlp returned no video info", video_id)
        return info

    async def fetch_once(self, video_id: str) -> VideoMetadata:
        user_agent = get_random_user_agent()
        logger.debug(f"[ytdlp] Extracting {video_id} with user agent {user_agent[:20]}...")

        # yt-dlp is blocking; keep the event loop free
        info = await asyncio.to_thread(self._extract, video_id, user_agent)

        title = info.get("title")
        if not title:
            raise UpstreamUnavailable("yt-dlp info has no title", video_id)

        return VideoMetadata(
            title=title,
            thumbnail_url=best_thumbnail(info, video_id),
            provider=self.get_source_name(),
        )
