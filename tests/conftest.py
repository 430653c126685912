"""Shared pytest fixtures for viralcut tests."""

import json
import sys
import tempfile
from pathlib import Path
from typing import Dict, Generator, List
from unittest.mock import AsyncMock, Mock

import pytest

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from models.clip import VideoMetadata  # noqa: E402
from models.moment import MomentRecord, VideoRef  # noqa: E402


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_config(temp_dir) -> Dict:
    """Sample configuration for testing."""
    return {
        "gemini_api_key": "test_gemini_key",
        "gemini_model": "gemini-2.0-flash",
        "bulk_temperature": 0.7,
        "bulk_top_p": 0.8,
        "bulk_top_k": 40,
        "bulk_max_output_tokens": 4096,
        "targeted_temperature": 0.6,
        "targeted_top_p": 0.9,
        "targeted_top_k": 40,
        "targeted_max_output_tokens": 2048,
        "metadata_max_attempts": 3,
        "metadata_retry_delay": 0.0,
        "ytdlp_timeout": 8.0,
        "oembed_timeout": 5.0,
        "invidious_base_url": "https://invidious.example/api/v1/videos/",
        "invidious_timeout": 5.0,
        "ytdlp_cookies_file": None,
        "max_clip_duration": 60,
        "request_timeout_seconds": 60.0,
        "render_enabled": False,
        "render_timeout": 45.0,
        "clips_output_dir": str(temp_dir / "clips"),
        "api_host": "127.0.0.1",
        "api_port": 8000,
        "log_level": "INFO",
        "log_json": False,
    }


@pytest.fixture
def video_ref() -> VideoRef:
    """A resolved reference to a well-known video."""
    return VideoRef(video_id="dQw4w9WgXcQ", source_url="https://www.youtube.com/watch?v=dQw4w9WgXcQ")


@pytest.fixture
def raw_moment() -> Dict:
    """One consistent moment in the model's wire format."""
    return {
        "moment_id": 1,
        "description": "Host trips over the cable mid-sentence",
        "timestamp_start": "00:02:35",
        "timestamp_end": "00:02:47",
        "duration_seconds": 12,
        "why_its_tiktok_funny": "Deadpan recovery after a pratfall",
        "suggested_caption_hook": "When the demo gods say no",
    }


@pytest.fixture
def raw_moments(raw_moment) -> List[Dict]:
    """Five consistent moments in the model's wire format."""
    moments = []
    for index in range(5):
        start = 60 + index * 60
        moments.append(
            {
                **raw_moment,
                "moment_id": index + 1,
                "timestamp_start": f"00:{start // 60:02d}:00",
                "timestamp_end": f"00:{start // 60:02d}:15",
                "duration_seconds": 15,
            }
        )
    return moments


@pytest.fixture
def moment() -> MomentRecord:
    """A validated moment lasting 12 seconds."""
    return MomentRecord(
        moment_id=7,
        description="Host trips over the cable mid-sentence",
        timestamp_start="00:02:35",
        timestamp_end="00:02:47",
        duration_seconds=12,
        viral_rationale="Deadpan recovery after a pratfall",
        caption_hook="When the demo gods say no",
    )


@pytest.fixture
def bulk_response(raw_moments) -> str:
    """Model output for bulk discovery, wrapped in a markdown fence."""
    return "```json\n" + json.dumps({"funniest_moments_list": raw_moments}) + "\n```"


@pytest.fixture
def mock_text_model():
    """Mock TextModel whose generate() is awaitable."""
    mock = Mock()
    mock.generate = AsyncMock(return_value="")
    return mock


@pytest.fixture
def mock_metadata_fetcher():
    """Mock MetadataFetcher answering from the primary provider."""
    mock = Mock()
    mock.fetch = AsyncMock(
        return_value=VideoMetadata(
            title="Never Gonna Give You Up",
            thumbnail_url="https://i.ytimg.com/vi/dQw4w9WgXcQ/hqdefault.jpg",
            provider="ytdlp",
        )
    )
    return mock
