"""Service routes: API identity and a health probe reporting which tiers are live."""

from api.dependencies import get_pipeline
from api.schemas import HealthResponse, RootResponse
from fastapi import APIRouter

API_NAME = "viralcut API"
API_VERSION = "1.0.0"

router = APIRouter(tags=["Core"])


@router.get("/", response_model=RootResponse, summary="API root")
async def root() -> RootResponse:
    return RootResponse(message=API_NAME, version=API_VERSION)


@router.get(
    "/api/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Reports liveness and whether clips can currently be rendered or only embedded.",
)
async def health() -> HealthResponse:
    backend = get_pipeline().clip_resolver.render_backend
    render_available = backend is not None and backend.is_available()
    return HealthResponse(status="healthy", render_available=render_available)
