"""Title/thumbnail lookup through an ordered chain of metadata providers.

fetch() never fails: it walks the chain (yt-dlp, oEmbed, Invidious) and
short-circuits on the first success. When every provider is down it returns
values derived purely from the video ID, so metadata can never block clip
resolution.
"""

import logging
from typing import List, Optional, Sequence

from models.clip import VideoMetadata
from services.metadata_sources import (
    InvidiousMetadataSource,
    MetadataSource,
    OEmbedMetadataSource,
    YtDlpMetadataSource,
)
from services.video_ref import thumbnail_url
from utils.errors import UpstreamUnavailable

logger = logging.getLogger(__name__)

FALLBACK_TITLE = "YouTube Video"
FALLBACK_PROVIDER = "fallback"
PRIMARY_PROVIDER = "ytdlp"


def last_resort_metadata(video_id: str) -> VideoMetadata:
    """Generic title plus the conventional thumbnail URL for the ID."""
    return VideoMetadata(
        title=FALLBACK_TITLE,
        thumbnail_url=thumbnail_url(video_id),
        provider=FALLBACK_PROVIDER,
    )


def default_sources(config: Optional[dict] = None) -> List[MetadataSource]:
    """Build the standard provider chain from configuration."""
    config = config or {}
    return [
        YtDlpMetadataSource(
            max_attempts=config.get("metadata_max_attempts", 3),
            retry_delay=config.get("metadata_retry_delay", 1.0),
            timeout=config.get("ytdlp_timeout", 8.0),
            cookies_file=config.get("ytdlp_cookies_file"),
        ),
        OEmbedMetadataSource(timeout=config.get("oembed_timeout", 5.0)),
        InvidiousMetadataSource(
            base_url=config.get("invidious_base_url", InvidiousMetadataSource.DEFAULT_BASE_URL),
            timeout=config.get("invidious_timeout", 5.0),
        ),
    ]


class MetadataFetcher:
    """Evaluates metadata sources in order until one succeeds."""

    def __init__(self, sources: Optional[Sequence[MetadataSource]] = None):
        """Initialize metadata fetcher.

        Args:
            sources: Ordered provider chain (default: yt-dlp, oEmbed, Invidious)
        """
        self.sources = list(sources) if sources is not None else default_sources()

    @classmethod
    def from_config(cls, config: dict) -> "MetadataFetcher":
        return cls(sources=default_sources(config))

    def worst_case_seconds(self) -> float:
        """Upper bound on ``fetch`` when every provider hangs until its timeout."""
        return sum(source.worst_case_seconds() for source in self.sources)

    async def fetch(self, video_id: str) -> VideoMetadata:
        """Return title and thumbnail for a video. Never raises.

        Args:
            video_id: YouTube video ID

        Returns:
            VideoMetadata; ``provider`` names the tier that answered
        """
        for source in self.sources:
            name = source.get_source_name()
            try:
                metadata = await source.fetch(video_id)
            except UpstreamUnavailable as e:
                logger.warning(f"[{name}] Metadata unavailable for {video_id}: {e.message}")
                continue
            except Exception as e:
                logger.error(f"[{name}] Unexpected metadata failure for {video_id}: {e}")
                continue

            logger.info(f"[{name}] Fetched metadata for {video_id}: {metadata.title!r}")
            return metadata

        logger.warning(f"All metadata providers failed for {video_id}, using last-resort values")
        return last_resort_metadata(video_id)
