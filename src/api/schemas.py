"""Pydantic request/response models for the viralcut API.

Request field aliases keep the camelCase shape the web client sends.
"""

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# Response Models
# =============================================================================


class RootResponse(BaseModel):
    """Root endpoint response."""

    message: str
    version: str

    model_config = {"json_schema_extra": {"examples": [{"message": "viralcut API", "version": "1.0.0"}]}}


class HealthResponse(BaseModel):
    """Health check response."""

    model_config = ConfigDict(populate_by_name=True)

    status: str
    render_available: bool = Field(default=False, alias="renderAvailable")


class MomentResponse(BaseModel):
    """One discovered moment, in the model's wire format."""

    moment_id: int
    description: str
    timestamp_start: str
    timestamp_end: str
    duration_seconds: int
    why_its_tiktok_funny: str
    suggested_caption_hook: str


class AnalyzeResponse(BaseModel):
    """Bulk discovery result."""

    model_config = ConfigDict(populate_by_name=True)

    funniest_moments_list: list[MomentResponse]
    is_fallback: bool = Field(default=False, alias="isFallback")


class GenerateClipResponse(BaseModel):
    """Embed clip payload returned by /api/generate-clip."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    clip_url: str = Field(alias="clipUrl")
    direct_url: str | None = Field(default=None, alias="directUrl")
    duration: int
    video_id: str | None = Field(default=None, alias="videoId")
    video_title: str | None = Field(default=None, alias="videoTitle")
    thumbnail_url: str | None = Field(default=None, alias="thumbnailUrl")
    start_seconds: int = Field(alias="startSeconds")
    end_seconds: int = Field(alias="endSeconds")
    is_embed: bool = Field(alias="isEmbed")
    format: str
    mode: str
    degraded: bool


# =============================================================================
# Request Models
# =============================================================================


class AnalyzeRequest(BaseModel):
    """Request body for bulk discovery."""

    url: str = Field(..., description="YouTube video URL")


class FindMomentRequest(BaseModel):
    """Request body for targeted discovery."""

    model_config = ConfigDict(populate_by_name=True)

    video_url: str = Field(..., alias="videoUrl", description="YouTube video URL")
    instruction: str = Field(..., description="What to look for, e.g. 'the dog jumping in the pool around 2:35'")


class GenerateClipRequest(BaseModel):
    """Request body for embed-only clip generation from raw timestamps."""

    model_config = ConfigDict(populate_by_name=True)

    video_url: str = Field(..., alias="videoUrl")
    start_time: str = Field(..., alias="startTime", description="HH:MM:SS or MM:SS")
    end_time: str = Field(..., alias="endTime", description="HH:MM:SS or MM:SS")
    moment_id: int = Field(..., alias="momentId")


class CreateClipRequest(BaseModel):
    """Request body for full clip resolution of a discovered moment."""

    model_config = ConfigDict(populate_by_name=True)

    video_url: str = Field(..., alias="videoUrl")
    moment: dict = Field(..., description="Moment in the discovery wire format")
