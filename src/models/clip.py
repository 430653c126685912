"""Clip-related data models for clip resolution."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ClipMode(str, Enum):
    """How a clip can be played back."""

    RENDERED = "rendered"  # Real media file produced by the render backend
    EMBED = "embed"  # Embeddable player URL with start/end offsets


@dataclass(frozen=True)
class VideoMetadata:
    """Title and thumbnail for a video, plus the provider that supplied them."""

    title: str
    thumbnail_url: str
    provider: str = "fallback"


@dataclass(frozen=True)
class ClipDescriptor:
    """Result of resolving a moment into something playable."""

    mode: ClipMode
    locator: str  # File path for rendered clips, embed URL otherwise
    start_seconds: int
    end_seconds: int
    title: Optional[str] = None
    thumbnail_url: Optional[str] = None
    degraded: bool = False  # True if any fallback layer was used
    share_url: Optional[str] = None
    video_id: Optional[str] = None

    @property
    def duration_seconds(self) -> int:
        """Calculate clip duration in seconds."""
        return self.end_seconds - self.start_seconds
