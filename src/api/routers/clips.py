"""Clip resolution routes for the viralcut API."""

import logging

from api.dependencies import get_pipeline
from api.errors import to_http_exception
from api.schemas import CreateClipRequest, GenerateClipRequest, GenerateClipResponse
from fastapi import APIRouter
from models.clip import ClipDescriptor, ClipMode
from services.moment_validator import validate_or_raise
from utils.errors import ViralCutError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Clips"])


def _to_response(descriptor: ClipDescriptor) -> GenerateClipResponse:
    return GenerateClipResponse(
        clip_url=descriptor.locator,
        direct_url=descriptor.share_url,
        duration=descriptor.duration_seconds,
        video_id=descriptor.video_id,
        video_title=descriptor.title,
        thumbnail_url=descriptor.thumbnail_url,
        start_seconds=descriptor.start_seconds,
        end_seconds=descriptor.end_seconds,
        is_embed=descriptor.mode is ClipMode.EMBED,
        format=descriptor.mode.value,
        mode=descriptor.mode.value,
        degraded=descriptor.degraded,
    )


@router.post(
    "/api/generate-clip",
    response_model=GenerateClipResponse,
    summary="Embed clip from timestamps",
    description="Build an embeddable reference bounded to startTime-endTime (max 60 seconds).",
    responses={400: {"description": "Invalid URL, timecode or duration"}, 504: {"description": "Timed out"}},
)
async def generate_clip(request: GenerateClipRequest) -> GenerateClipResponse:
    """Embed-only clip resolution from raw timestamps."""
    logger.info(
        f"Clip generation request: {request.video_url} "
        f"{request.start_time}-{request.end_time} (moment {request.moment_id})"
    )
    pipeline = get_pipeline()
    try:
        descriptor = await pipeline.resolve_clip_times(
            request.video_url, request.start_time, request.end_time, request.moment_id
        )
    except ViralCutError as e:
        raise to_http_exception(e)

    return _to_response(descriptor)


@router.post(
    "/api/create-clip",
    response_model=GenerateClipResponse,
    summary="Resolve a discovered moment",
    description="Render the moment when the render backend is available, else return an embed reference.",
    responses={400: {"description": "Invalid URL, moment or duration"}, 504: {"description": "Timed out"}},
)
async def create_clip(request: CreateClipRequest) -> GenerateClipResponse:
    """Full clip resolution for a discovered moment."""
    pipeline = get_pipeline()
    try:
        moment = validate_or_raise(request.moment)
        descriptor = await pipeline.resolve_clip(request.video_url, moment)
    except ViralCutError as e:
        raise to_http_exception(e)

    return _to_response(descriptor)
