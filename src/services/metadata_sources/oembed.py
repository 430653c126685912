"""Secondary metadata source: YouTube's oEmbed endpoint."""

import logging
from typing import Optional

import httpx

from models.clip import VideoMetadata
from services.metadata_sources.base import MetadataSource
from services.video_ref import thumbnail_url, watch_url
from utils.errors import UpstreamUnavailable

logger = logging.getLogger(__name__)


class OEmbedMetadataSource(MetadataSource):
    """Lightweight title/thumbnail lookup that rarely trips anti-scraping checks."""

    BASE_URL = "https://www.youtube.com/oembed"

    def __init__(
        self,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(max_attempts=1, timeout=timeout)
        self._transport = transport

    def get_source_name(self) -> str:
        return "oembed"

    async def fetch_once(self, video_id: str) -> VideoMetadata:
        params = {"url": watch_url(video_id), "format": "json"}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(self.BASE_URL, params=params)
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise UpstreamUnavailable(f"oEmbed lookup failed: {e}", video_id) from e

        if not isinstance(data, dict):
            raise UpstreamUnavailable("oEmbed returned an unexpected payload", video_id)

        return VideoMetadata(
            title=data.get("title") or "YouTube Video",
            thumbnail_url=data.get("thumbnail_url") or thumbnail_url(video_id),
            provider=self.get_source_name(),
        )
