"""Service singletons and dependency injection for the viralcut API.

The pipeline holds only read-only configuration and stateless services, so
one instance is safely shared by concurrent requests.
"""

from services.pipeline import ViralCutPipeline
from utils.config import load_config

# Service singletons
_pipeline: ViralCutPipeline | None = None


def get_pipeline() -> ViralCutPipeline:
    """Get or create the pipeline instance."""
    global _pipeline
    if _pipeline is None:
        _pipeline = ViralCutPipeline.from_config(load_config())
    return _pipeline


def set_pipeline(pipeline: ViralCutPipeline | None) -> None:
    """Replace the pipeline instance (tests inject fakes here)."""
    global _pipeline
    _pipeline = pipeline
