"""Moment discovery routes for the viralcut API."""

import logging

from api.dependencies import get_pipeline
from api.errors import to_http_exception
from api.schemas import AnalyzeRequest, AnalyzeResponse, FindMomentRequest, MomentResponse
from fastapi import APIRouter
from utils.errors import ViralCutError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Moments"])


@router.post(
    "/api/analyze",
    response_model=AnalyzeResponse,
    summary="Discover moments",
    description="Propose 5-8 short-form worthy moments. Falls back to canned moments if the model fails.",
    responses={400: {"description": "Invalid video URL"}, 504: {"description": "Timed out"}},
)
async def analyze(request: AnalyzeRequest) -> AnalyzeResponse:
    """Bulk moment discovery."""
    pipeline = get_pipeline()
    try:
        result = await pipeline.analyze(request.url)
    except ViralCutError as e:
        raise to_http_exception(e)

    return AnalyzeResponse(
        funniest_moments_list=[MomentResponse(**m.to_dict()) for m in result.moments],
        is_fallback=result.used_fallback,
    )


@router.post(
    "/api/find-custom-moment",
    response_model=MomentResponse,
    summary="Find a specific moment",
    description="Locate one moment matching a free-text instruction. Fails visibly instead of guessing.",
    responses={
        400: {"description": "Invalid video URL"},
        422: {"description": "No valid moment could be produced"},
        504: {"description": "Timed out"},
    },
)
async def find_custom_moment(request: FindMomentRequest) -> MomentResponse:
    """Targeted moment discovery."""
    logger.info(f"Finding custom moment with instruction: {request.instruction!r}")
    pipeline = get_pipeline()
    try:
        moment = await pipeline.discover_one(request.video_url, request.instruction)
    except ViralCutError as e:
        raise to_http_exception(e)

    return MomentResponse(**moment.to_dict())
