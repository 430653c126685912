# Data models for viralcut
from .moment import (
    MOMENT_FIELDS,
    BULK_SETTINGS,
    TARGETED_SETTINGS,
    DiscoveryResult,
    GenerationSettings,
    MomentRecord,
    ParseOutcome,
    RecordRejection,
    RejectionReason,
    VideoRef,
)
from .clip import ClipDescriptor, ClipMode, VideoMetadata

__all__ = [
    "MOMENT_FIELDS",
    "MomentRecord",
    "RecordRejection",
    "RejectionReason",
    "VideoRef",
    "ParseOutcome",
    # Model sampling
    "GenerationSettings",
    "BULK_SETTINGS",
    "TARGETED_SETTINGS",
    "DiscoveryResult",
    # Clip resolution
    "ClipDescriptor",
    "ClipMode",
    "VideoMetadata",
]
