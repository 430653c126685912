"""Base abstraction for video metadata providers."""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Optional

from models.clip import VideoMetadata
from utils.errors import UpstreamUnavailable

logger = logging.getLogger(__name__)


class MetadataSource(ABC):
    """One tier of the metadata fallback chain (yt-dlp, oEmbed, Invidious, ...).

    Each source owns its retry policy: ``max_attempts`` sequential attempts
    separated by ``retry_delay`` seconds, each bounded by ``timeout``.
    """

    def __init__(
        self,
        max_attempts: int = 1,
        retry_delay: float = 0.0,
        timeout: Optional[float] = None,
    ):
        self.max_attempts = max(1, max_attempts)
        self.retry_delay = retry_delay
        self.timeout = timeout

    @abstractmethod
    def get_source_name(self) -> str:
        """Get the name of this metadata source.

        Returns:
            Source name (e.g., "ytdlp", "oembed", "invidious")
        """

    def worst_case_seconds(self) -> float:
        """Longest time ``fetch`` can take before giving up."""
        if not self.timeout:
            return float("inf")
        return self.max_attempts * self.timeout + (self.max_attempts - 1) * self.retry_delay

    @abstractmethod
    async def fetch_once(self, video_id: str) -> VideoMetadata:
        """Make a single lookup attempt.

        Raises:
            UpstreamUnavailable: When the provider fails or returns nothing usable
        """

    async def fetch(self, video_id: str) -> VideoMetadata:
        """Fetch metadata, retrying sequentially up to ``max_attempts`` times.

        Raises:
            UpstreamUnavailable: When every attempt failed
        """
        name = self.get_source_name()
        last_error: Optional[Exception] = None

        for attempt in range(1, self.max_attempts + 1):
            try:
                if self.timeout:
                    return await asyncio.wait_for(self.fetch_once(video_id), timeout=self.timeout)
                return await self.fetch_once(video_id)
            except asyncio.TimeoutError:
                last_error = UpstreamUnavailable(f"{name} timed out after {self.timeout}s", video_id)
            except UpstreamUnavailable as e:
                last_error = e

            logger.warning(
                f"[{name}] Attempt {attempt}/{self.max_attempts} failed for {video_id}: {last_error}"
            )
            if attempt < self.max_attempts and self.retry_delay > 0:
                await asyncio.sleep(self.retry_delay)

        raise UpstreamUnavailable(
            f"{name} failed after {self.max_attempts} attempt(s): {last_error}", video_id
        )
