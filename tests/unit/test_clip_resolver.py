"""Unit tests for clip resolution (render tier and embed tier)."""

import asyncio
from unittest.mock import AsyncMock, Mock

import pytest

from models.clip import ClipMode, VideoMetadata
from models.moment import MomentRecord
from services.clip_resolver import ClipResolver
from services.metadata_fetcher import last_resort_metadata
from utils.errors import InvalidClipDuration, MalformedTimecode, RenderError


@pytest.fixture
def mock_render_backend():
    backend = Mock()
    backend.is_available = Mock(return_value=True)
    backend.render = AsyncMock(return_value="/clips/tiktok-clip-7-1700000000000.mp4")
    return backend


def long_moment(seconds: int) -> MomentRecord:
    return MomentRecord(
        moment_id=3,
        description="Whole monologue",
        timestamp_start="00:10:00",
        timestamp_end=f"00:{10 + seconds // 60:02d}:{seconds % 60:02d}",
        duration_seconds=seconds,
        viral_rationale="Too long",
        caption_hook="Wait for it",
    )


@pytest.mark.unit
class TestEmbedTier:
    """Clip resolution without a usable renderer."""

    @pytest.mark.asyncio
    async def test_embed_descriptor(self, mock_metadata_fetcher, video_ref, moment):
        resolver = ClipResolver(metadata_fetcher=mock_metadata_fetcher)

        clip = await resolver.resolve(video_ref, moment)

        assert clip.mode is ClipMode.EMBED
        assert clip.locator == "https://www.youtube.com/embed/dQw4w9WgXcQ?start=155&end=167&autoplay=1"
        assert clip.share_url == "https://www.youtube.com/watch?v=dQw4w9WgXcQ&t=155s"
        assert clip.start_seconds == 155
        assert clip.end_seconds == 167
        assert clip.duration_seconds == 12
        assert clip.title == "Never Gonna Give You Up"
        assert clip.video_id == "dQw4w9WgXcQ"
        assert clip.degraded is True

    @pytest.mark.asyncio
    async def test_embed_with_last_resort_metadata(self, video_ref, moment):
        fetcher = Mock()
        fetcher.fetch = AsyncMock(return_value=last_resort_metadata(video_ref.video_id))
        resolver = ClipResolver(metadata_fetcher=fetcher)

        clip = await resolver.resolve(video_ref, moment)

        assert clip.title == "YouTube Video"
        assert clip.thumbnail_url == "https://i.ytimg.com/vi/dQw4w9WgXcQ/maxresdefault.jpg"
        assert clip.degraded is True

    @pytest.mark.asyncio
    async def test_unavailable_backend_is_not_called(
        self, mock_metadata_fetcher, mock_render_backend, video_ref, moment
    ):
        mock_render_backend.is_available.return_value = False
        resolver = ClipResolver(metadata_fetcher=mock_metadata_fetcher, render_backend=mock_render_backend)

        clip = await resolver.resolve(video_ref, moment)

        assert clip.mode is ClipMode.EMBED
        mock_render_backend.render.assert_not_called()


@pytest.mark.unit
class TestRenderTier:
    """Clip resolution with a render backend."""

    @pytest.mark.asyncio
    async def test_rendered_descriptor(self, mock_metadata_fetcher, mock_render_backend, video_ref, moment):
        resolver = ClipResolver(metadata_fetcher=mock_metadata_fetcher, render_backend=mock_render_backend)

        clip = await resolver.resolve(video_ref, moment)

        assert clip.mode is ClipMode.RENDERED
        assert clip.locator == "/clips/tiktok-clip-7-1700000000000.mp4"
        assert clip.degraded is False
        mock_render_backend.render.assert_awaited_once_with(video_ref, moment)

    @pytest.mark.asyncio
    async def test_rendered_with_fallback_metadata_is_degraded(self, mock_render_backend, video_ref, moment):
        fetcher = Mock()
        fetcher.fetch = AsyncMock(return_value=VideoMetadata("Rick", "https://img/x.jpg", provider="oembed"))
        resolver = ClipResolver(metadata_fetcher=fetcher, render_backend=mock_render_backend)

        clip = await resolver.resolve(video_ref, moment)

        assert clip.mode is ClipMode.RENDERED
        assert clip.degraded is True

    @pytest.mark.asyncio
    async def test_render_failure_falls_back_to_embed(
        self, mock_metadata_fetcher, mock_render_backend, video_ref, moment
    ):
        mock_render_backend.render.side_effect = RenderError("ffmpeg exploded", video_ref.video_id)
        resolver = ClipResolver(metadata_fetcher=mock_metadata_fetcher, render_backend=mock_render_backend)

        clip = await resolver.resolve(video_ref, moment)

        assert clip.mode is ClipMode.EMBED
        assert clip.degraded is True

    @pytest.mark.asyncio
    async def test_slow_render_falls_back_to_embed(
        self, mock_metadata_fetcher, mock_render_backend, video_ref, moment
    ):
        cancelled = asyncio.Event()

        async def hanging_render(video_ref, moment):
            try:
                await asyncio.sleep(5)
            except asyncio.CancelledError:
                cancelled.set()
                raise

        mock_render_backend.render.side_effect = hanging_render
        resolver = ClipResolver(
            metadata_fetcher=mock_metadata_fetcher,
            render_backend=mock_render_backend,
            render_timeout=0.05,
        )

        clip = await resolver.resolve(video_ref, moment)

        assert clip.mode is ClipMode.EMBED
        assert clip.title == "Never Gonna Give You Up"
        assert cancelled.is_set()
        mock_metadata_fetcher.fetch.assert_awaited_once_with(video_ref.video_id)

    @pytest.mark.asyncio
    async def test_resolve_times_never_renders(self, mock_metadata_fetcher, mock_render_backend, video_ref):
        resolver = ClipResolver(metadata_fetcher=mock_metadata_fetcher, render_backend=mock_render_backend)

        clip = await resolver.resolve_times(video_ref, "2:35", "2:47", moment_id=7)

        assert clip.mode is ClipMode.EMBED
        assert (clip.start_seconds, clip.end_seconds) == (155, 167)
        mock_render_backend.render.assert_not_called()


@pytest.mark.unit
class TestDuration:
    """Tests for the hard duration ceiling."""

    @pytest.mark.asyncio
    async def test_seventy_seconds_is_rejected(self, mock_metadata_fetcher, mock_render_backend, video_ref):
        resolver = ClipResolver(metadata_fetcher=mock_metadata_fetcher, render_backend=mock_render_backend)

        with pytest.raises(InvalidClipDuration):
            await resolver.resolve(video_ref, long_moment(70))

        mock_render_backend.render.assert_not_called()
        mock_metadata_fetcher.fetch.assert_not_called()

    @pytest.mark.asyncio
    async def test_sixty_seconds_is_accepted(self, mock_metadata_fetcher, video_ref):
        resolver = ClipResolver(metadata_fetcher=mock_metadata_fetcher)

        clip = await resolver.resolve(video_ref, long_moment(60))

        assert clip.duration_seconds == 60

    @pytest.mark.parametrize("start,end", [(100, 100), (100, 90), (0, 61)])
    def test_check_duration(self, mock_metadata_fetcher, start, end):
        with pytest.raises(InvalidClipDuration):
            ClipResolver(metadata_fetcher=mock_metadata_fetcher).check_duration(start, end)

    def test_custom_ceiling(self, mock_metadata_fetcher):
        resolver = ClipResolver(metadata_fetcher=mock_metadata_fetcher, max_duration=10)
        assert resolver.check_duration(0, 10) == 10
        with pytest.raises(InvalidClipDuration):
            resolver.check_duration(0, 11)

    @pytest.mark.asyncio
    async def test_resolve_times_rejects_reversed_span(self, mock_metadata_fetcher, video_ref):
        resolver = ClipResolver(metadata_fetcher=mock_metadata_fetcher)

        with pytest.raises(InvalidClipDuration):
            await resolver.resolve_times(video_ref, "00:02:47", "00:02:35")

    @pytest.mark.asyncio
    async def test_resolve_times_rejects_malformed(self, mock_metadata_fetcher, video_ref):
        resolver = ClipResolver(metadata_fetcher=mock_metadata_fetcher)

        with pytest.raises(MalformedTimecode):
            await resolver.resolve_times(video_ref, "soon", "00:02:35")
