"""Tertiary metadata source: a public Invidious mirror API."""

import logging
from typing import Optional

import httpx

from models.clip import VideoMetadata
from services.metadata_sources.base import MetadataSource
from services.video_ref import thumbnail_url
from utils.errors import UpstreamUnavailable
from utils.user_agents import get_random_user_agent

logger = logging.getLogger(__name__)


class InvidiousMetadataSource(MetadataSource):
    """Invidious ``/api/v1/videos/<id>`` lookup with a short timeout.

    API Documentation: https://docs.invidious.io/api/
    """

    DEFAULT_BASE_URL = "https://invidious.snopyta.org/api/v1/videos/"

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(max_attempts=1, timeout=timeout)
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self._transport = transport

    def get_source_name(self) -> str:
        return "invidious"

    async def fetch_once(self, video_id: str) -> VideoMetadata:
        headers = {"User-Agent": get_random_user_agent()}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(f"{self.base_url}{video_id}", headers=headers)
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise UpstreamUnavailable(f"Invidious lookup failed: {e}", video_id) from e

        if not isinstance(data, dict) or not data.get("title"):
            raise UpstreamUnavailable("Invidious returned no title", video_id)

        thumbnails = data.get("videoThumbnails") or []
        first_url = thumbnails[0].get("url") if thumbnails and isinstance(thumbnails[0], dict) else None

        return VideoMetadata(
            title=data["title"],
            thumbnail_url=first_url or thumbnail_url(video_id),
            provider=self.get_source_name(),
        )
