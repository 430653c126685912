"""Error taxonomy for the moment discovery and clip resolution pipeline.

Every error carries a human-readable message plus the condition that
triggered it, so the HTTP layer can surface both without string parsing.
"""

from typing import Any, Optional


class ViralCutError(Exception):
    """Base class for all pipeline errors."""

    def __init__(self, message: str, condition: Any = None):
        super().__init__(message)
        self.message = message
        self.condition = condition

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable error payload."""
        payload = {"error": type(self).__name__, "message": self.message}
        if self.condition is not None:
            payload["condition"] = str(self.condition)
        return payload


class MalformedTimecode(ViralCutError):
    """Timecode has the wrong number of segments or a non-numeric part."""


class InvalidVideoUrl(ViralCutError):
    """No video identifier could be located in the supplied URL."""


class UnparsableResponse(ViralCutError):
    """Model output contained no parseable structured document."""


class RecordValidationError(ViralCutError):
    """A moment record failed a structural invariant."""

    def __init__(self, message: str, reason: str, condition: Any = None):
        super().__init__(message, condition)
        self.reason = reason

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload["reason"] = self.reason
        return payload


class MomentNotFound(ViralCutError):
    """Targeted discovery could not produce a valid moment."""

    def __init__(self, message: str, condition: Any = None, reason: Optional[str] = None):
        super().__init__(message, condition)
        self.reason = reason

    def to_dict(self) -> dict:
        payload = super().to_dict()
        if self.reason:
            payload["reason"] = self.reason
        return payload


class InvalidClipDuration(ViralCutError):
    """Requested clip is empty, reversed, or longer than the hard ceiling."""


class UpstreamUnavailable(ViralCutError):
    """A metadata provider failed; handled inside the metadata chain."""


class RenderError(ViralCutError):
    """The render backend could not produce a clip file."""


class PipelineTimeout(ViralCutError):
    """A pipeline call exceeded its wall-clock budget."""
