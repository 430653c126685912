"""Moment-related data models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from utils.timecode import to_seconds


# Wire keys used by the generative model and the HTTP API
MOMENT_FIELDS = (
    "moment_id",
    "description",
    "timestamp_start",
    "timestamp_end",
    "duration_seconds",
    "why_its_tiktok_funny",
    "suggested_caption_hook",
)


@dataclass(frozen=True)
class MomentRecord:
    """One candidate segment of a source video.

    Only ever built by the validator or the canned fallback list, so the
    timecodes are normalized ``HH:MM:SS`` and the duration is consistent.
    """

    moment_id: int
    description: str
    timestamp_start: str
    timestamp_end: str
    duration_seconds: int
    viral_rationale: str
    caption_hook: str

    @property
    def start_seconds(self) -> int:
        return to_seconds(self.timestamp_start)

    @property
    def end_seconds(self) -> int:
        return to_seconds(self.timestamp_end)

    def to_dict(self) -> dict:
        """Convert to the wire format used by the model and the API."""
        return {
            "moment_id": self.moment_id,
            "description": self.description,
            "timestamp_start": self.timestamp_start,
            "timestamp_end": self.timestamp_end,
            "duration_seconds": self.duration_seconds,
            "why_its_tiktok_funny": self.viral_rationale,
            "suggested_caption_hook": self.caption_hook,
        }


class RejectionReason(str, Enum):
    """First invariant a raw record failed."""

    NOT_AN_OBJECT = "not-an-object"
    MISSING_FIELD = "missing-field"
    BAD_TYPE = "bad-type"
    MALFORMED_TIMECODE = "malformed-timecode"
    BAD_ORDER = "bad-order"
    DURATION_MISMATCH = "duration-mismatch"


@dataclass(frozen=True)
class RecordRejection:
    """Typed rejection returned by the validator instead of raising."""

    reason: RejectionReason
    message: str
    field: Optional[str] = None


@dataclass(frozen=True)
class VideoRef:
    """Resolved identity of a source video.

    Embed URLs may already carry ``start``/``end`` offsets; they are kept
    here so a player can be seeded without a moment record.
    """

    video_id: str
    source_url: str
    start_seconds: Optional[int] = None
    end_seconds: Optional[int] = None


@dataclass(frozen=True)
class ParseOutcome:
    """Result of recovering a structured document from model text."""

    ok: bool
    value: Any = None
    error: Optional[str] = None
    strategy: Optional[str] = None  # "full" or "scan" on success

    @classmethod
    def success(cls, value: Any, strategy: str) -> "ParseOutcome":
        return cls(ok=True, value=value, strategy=strategy)

    @classmethod
    def failure(cls, error: str) -> "ParseOutcome":
        return cls(ok=False, error=error)


@dataclass(frozen=True)
class GenerationSettings:
    """Sampling configuration for one kind of model call."""

    temperature: float
    top_p: float
    top_k: int
    max_output_tokens: int

    @classmethod
    def from_config(cls, config: dict, prefix: str) -> "GenerationSettings":
        """Build settings from ``{prefix}_temperature`` style config keys."""
        return cls(
            temperature=config[f"{prefix}_temperature"],
            top_p=config[f"{prefix}_top_p"],
            top_k=config[f"{prefix}_top_k"],
            max_output_tokens=config[f"{prefix}_max_output_tokens"],
        )


BULK_SETTINGS = GenerationSettings(temperature=0.7, top_p=0.8, top_k=40, max_output_tokens=4096)
TARGETED_SETTINGS = GenerationSettings(temperature=0.6, top_p=0.9, top_k=40, max_output_tokens=2048)


@dataclass
class DiscoveryResult:
    """Bulk discovery output with bookkeeping about how it was produced."""

    moments: list[MomentRecord] = field(default_factory=list)
    used_fallback: bool = False
    rejected_count: int = 0
