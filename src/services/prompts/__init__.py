"""Prompts module - centralized prompt templates for AI services.

Re-exports all prompt constants and utilities for easy importing:
    from services.prompts import PROMPT_VERSIONS, strip_markdown_code_blocks
    from services.prompts import BULK_MOMENT_FINDER, TARGETED_MOMENT_FINDER
"""

from services.prompts._base import strip_markdown_code_blocks
from services.prompts.moments import (
    BULK_MOMENT_FINDER,
    TARGETED_MOMENT_FINDER,
    TIME_HINT_ABSENT,
    TIME_HINT_PRESENT,
)

# Increment when a prompt changes so logged responses can be traced to the prompt revision
PROMPT_VERSIONS = {
    "discover_many": "v1",
    "discover_one": "v1",
}

__all__ = [
    # Utilities
    "strip_markdown_code_blocks",
    # Version tracking
    "PROMPT_VERSIONS",
    # Moment discovery prompts
    "BULK_MOMENT_FINDER",
    "TARGETED_MOMENT_FINDER",
    "TIME_HINT_PRESENT",
    "TIME_HINT_ABSENT",
]
