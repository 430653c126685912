"""Pipeline facade exposed to the presentation layer.

Each call is one request-scoped task: resolve the URL, run the discovery or
resolution step, and enforce an overall wall-clock budget. Nothing is shared
between calls, so cancelling one request never affects another.
"""

import asyncio
import logging
from typing import Awaitable, List, Optional, TypeVar

from models.clip import ClipDescriptor
from models.moment import DiscoveryResult, MomentRecord, VideoRef
from services import video_ref as video_ref_resolver
from services.ai_service import AIService, TextModel
from services.clip_resolver import DEFAULT_RENDER_TIMEOUT, ClipResolver
from services.metadata_fetcher import MetadataFetcher
from services.moment_discovery import MomentDiscoveryService, fallback_moments
from services.render_backend import YtDlpRenderBackend
from utils.errors import PipelineTimeout

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TIMEOUT_SECONDS = 60.0


class ViralCutPipeline:
    """discover_many / discover_one / resolve_clip, each bounded in time."""

    def __init__(
        self,
        discovery: MomentDiscoveryService,
        clip_resolver: ClipResolver,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        self.discovery = discovery
        self.clip_resolver = clip_resolver
        self.timeout_seconds = timeout_seconds

    @classmethod
    def from_config(cls, config: dict, model: Optional[TextModel] = None) -> "ViralCutPipeline":
        """Wire the production collaborators from configuration."""
        if model is None:
            model = AIService(
                api_key=config.get("gemini_api_key") or "",
                model_name=config.get("gemini_model", "gemini-2.0-flash"),
            )
        discovery = MomentDiscoveryService.from_config(model, config)
        clip_resolver = ClipResolver(
            metadata_fetcher=MetadataFetcher.from_config(config),
            render_backend=YtDlpRenderBackend.from_config(config),
            max_duration=config.get("max_clip_duration", 60),
            render_timeout=config.get("render_timeout", DEFAULT_RENDER_TIMEOUT),
        )
        return cls(
            discovery=discovery,
            clip_resolver=clip_resolver,
            timeout_seconds=config.get("request_timeout_seconds", DEFAULT_TIMEOUT_SECONDS),
        )

    async def _bounded(self, operation: str, awaitable: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            logger.error(f"{operation} exceeded {self.timeout_seconds}s budget")
            raise PipelineTimeout(
                f"{operation} timed out after {self.timeout_seconds:g} seconds", operation
            ) from None

    def resolve_video(self, url: str) -> VideoRef:
        """Resolve a URL; raises InvalidVideoUrl immediately."""
        return video_ref_resolver.resolve(url)

    async def analyze(self, url: str) -> DiscoveryResult:
        """Bulk discovery including whether the canned fallback was used.

        Running out of time counts as a discovery failure: the canned moments
        come back instead of a PipelineTimeout.
        """
        video = self.resolve_video(url)
        try:
            return await self._bounded("discover_many", self.discovery.analyze(video))
        except PipelineTimeout:
            logger.info(f"Using fallback moments for {video.video_id} (discovery timed out)")
            return DiscoveryResult(moments=fallback_moments(), used_fallback=True)

    async def discover_many(self, url: str) -> List[MomentRecord]:
        result = await self.analyze(url)
        return result.moments

    async def discover_one(self, url: str, instruction: str) -> MomentRecord:
        video = self.resolve_video(url)
        return await self._bounded("discover_one", self.discovery.discover_one(video, instruction))

    async def resolve_clip(self, url: str, moment: MomentRecord) -> ClipDescriptor:
        video = self.resolve_video(url)
        return await self._bounded("resolve_clip", self.clip_resolver.resolve(video, moment))

    async def resolve_clip_times(
        self, url: str, start_timecode: str, end_timecode: str, moment_id: int = 0
    ) -> ClipDescriptor:
        """Resolve a raw start/end pair into an embed reference."""
        video = self.resolve_video(url)
        return await self._bounded(
            "resolve_clip",
            self.clip_resolver.resolve_times(video, start_timecode, end_timecode, moment_id),
        )
