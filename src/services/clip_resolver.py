"""Clip resolution: turn a validated moment into something playable.

Two tiers: a real render when the backend is available, else an embeddable
reference with precomputed offsets, which is always constructible from data
already in hand. Only a bad duration is surfaced as an error.
"""

import asyncio
import logging
from typing import Optional

from models.clip import ClipDescriptor, ClipMode
from models.moment import MomentRecord, VideoRef
from services.metadata_fetcher import PRIMARY_PROVIDER, MetadataFetcher
from services.render_backend import RenderBackend
from services.video_ref import embed_url, watch_url
from utils.errors import InvalidClipDuration
from utils.timecode import to_seconds, to_timecode

logger = logging.getLogger(__name__)

# Hard ceiling, distinct from the soft targets used by discovery
MAX_CLIP_DURATION = 60

# Render runs alongside the metadata chain and must finish inside the request budget
DEFAULT_RENDER_TIMEOUT = 45.0


class ClipResolver:
    """Resolves moments into ClipDescriptors through the render/embed chain."""

    def __init__(
        self,
        metadata_fetcher: MetadataFetcher,
        render_backend: Optional[RenderBackend] = None,
        max_duration: int = MAX_CLIP_DURATION,
        render_timeout: Optional[float] = DEFAULT_RENDER_TIMEOUT,
    ):
        """Initialize clip resolver.

        Args:
            metadata_fetcher: Title/thumbnail provider chain
            render_backend: Optional renderer; None means embed only
            max_duration: Longest clip accepted, in seconds
            render_timeout: Seconds before a render is abandoned for the embed tier
        """
        self.metadata_fetcher = metadata_fetcher
        self.render_backend = render_backend
        self.max_duration = max_duration
        self.render_timeout = render_timeout

    def check_duration(self, start_seconds: int, end_seconds: int) -> int:
        """Validate the span and return its duration.

        Raises:
            InvalidClipDuration: When duration <= 0 or above the ceiling
        """
        duration = end_seconds - start_seconds
        if duration <= 0 or duration > self.max_duration:
            raise InvalidClipDuration(
                f"Invalid clip duration: {duration}s (must be between 1 and {self.max_duration}s)",
                f"{to_timecode(max(start_seconds, 0))}-{to_timecode(max(end_seconds, 0))}",
            )
        return duration

    async def _try_render(self, video_ref: VideoRef, moment: MomentRecord) -> Optional[str]:
        if self.render_backend is None:
            return None
        if not self.render_backend.is_available():
            logger.debug("Render backend unavailable, using embed reference")
            return None

        try:
            if self.render_timeout:
                return await asyncio.wait_for(
                    self.render_backend.render(video_ref, moment), timeout=self.render_timeout
                )
            return await self.render_backend.render(video_ref, moment)
        except asyncio.TimeoutError:
            logger.warning(
                f"Render of moment {moment.moment_id} exceeded {self.render_timeout:g}s, falling back to embed"
            )
            return None
        except Exception as e:
            logger.warning(f"Render failed for moment {moment.moment_id}, falling back to embed: {e}")
            return None

    async def resolve(
        self, video_ref: VideoRef, moment: MomentRecord, allow_render: bool = True
    ) -> ClipDescriptor:
        """Resolve a moment into a clip descriptor.

        Args:
            video_ref: Source video
            moment: Validated moment
            allow_render: False skips the render tier (embed-only requests)

        Returns:
            ClipDescriptor in ``rendered`` or ``embed`` mode

        Raises:
            InvalidClipDuration: When the moment's span is empty or too long
        """
        start = to_seconds(moment.timestamp_start)
        end = to_seconds(moment.timestamp_end)
        duration = self.check_duration(start, end)
        logger.info(
            f"Resolving clip {moment.moment_id} for {video_ref.video_id}: "
            f"{moment.timestamp_start}-{moment.timestamp_end} ({duration}s)"
        )

        if allow_render:
            rendered_path, metadata = await asyncio.gather(
                self._try_render(video_ref, moment),
                self.metadata_fetcher.fetch(video_ref.video_id),
            )
        else:
            rendered_path = None
            metadata = await self.metadata_fetcher.fetch(video_ref.video_id)
        share = watch_url(video_ref.video_id, start)

        if rendered_path:
            return ClipDescriptor(
                mode=ClipMode.RENDERED,
                locator=rendered_path,
                start_seconds=start,
                end_seconds=end,
                title=metadata.title,
                thumbnail_url=metadata.thumbnail_url,
                degraded=metadata.provider != PRIMARY_PROVIDER,
                share_url=share,
                video_id=video_ref.video_id,
            )

        return ClipDescriptor(
            mode=ClipMode.EMBED,
            locator=embed_url(video_ref.video_id, start, end),
            start_seconds=start,
            end_seconds=end,
            title=metadata.title,
            thumbnail_url=metadata.thumbnail_url,
            degraded=True,
            share_url=share,
            video_id=video_ref.video_id,
        )

    async def resolve_times(
        self,
        video_ref: VideoRef,
        start_timecode: str,
        end_timecode: str,
        moment_id: int = 0,
    ) -> ClipDescriptor:
        """Resolve a raw start/end pair into an embed reference.

        Raises:
            MalformedTimecode: When either timecode cannot be parsed
            InvalidClipDuration: When the span is empty or too long
        """
        start = to_seconds(start_timecode)
        end = to_seconds(end_timecode)
        duration = self.check_duration(start, end)

        moment = MomentRecord(
            moment_id=moment_id,
            description="Requested clip",
            timestamp_start=to_timecode(start),
            timestamp_end=to_timecode(end),
            duration_seconds=duration,
            viral_rationale="Requested directly by timestamps",
            caption_hook="",
        )
        return await self.resolve(video_ref, moment, allow_render=False)
