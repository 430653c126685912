"""Base utilities for prompts module.

Contains shared helper functions used across prompt modules.
"""

import re

_OPENING_FENCE = re.compile(r"^```[A-Za-z0-9_-]*\s*")


def strip_markdown_code_blocks(text: str) -> str:
    """Strip markdown code blocks from AI response text.

    Args:
        text: Raw text that may contain markdown code blocks

    Returns:
        Cleaned text with markdown code blocks removed
    """
    text = text.strip()
    text = _OPENING_FENCE.sub("", text, count=1)  # Remove ```json, ``` etc.
    if text.endswith("```"):
        text = text[:-3]  # Remove ```
    return text.strip()
