"""Recover structured JSON documents from free-form model output.

Generative models often wrap valid JSON in prose or markdown fences. Two
strategies are tried in order, first success wins:

1. Parse the whole text (with surrounding fences stripped).
2. Decode the first valid ``{...}`` object found in the surrounding text,
   skipping braces that do not open one.

No semantic validation happens here; see moment_validator for that.
"""

import json
import logging
from typing import Any, Iterator, Optional, Tuple

from models.moment import ParseOutcome
from services.prompts import strip_markdown_code_blocks
from utils.errors import UnparsableResponse

logger = logging.getLogger(__name__)


def _is_document(value: Any) -> bool:
    return isinstance(value, (dict, list))


def _parse_full(text: str) -> Optional[Any]:
    try:
        value = json.loads(strip_markdown_code_blocks(text))
    except (json.JSONDecodeError, ValueError):
        return None
    return value if _is_document(value) else None


_decoder = json.JSONDecoder()


def iter_embedded_objects(text: str, start: int = 0) -> Iterator[Tuple[int, dict]]:
    """Yield ``(offset, object)`` for each JSON object embedded in ``text``.

    Decoding is attempted at every ``{`` in order. Braces that do not open a
    valid object (prose, a stray unbalanced brace) are skipped, and scanning
    resumes after the end of each decoded object.
    """
    index = text.find("{", start)
    while index != -1:
        try:
            value, end = _decoder.raw_decode(text, index)
        except (json.JSONDecodeError, ValueError):
            index = text.find("{", index + 1)
            continue
        yield index, value
        index = text.find("{", end)


def _parse_scan(text: str) -> Optional[Any]:
    for _, value in iter_embedded_objects(text):
        return value
    return None


def parse(text: str) -> ParseOutcome:
    """Extract a JSON object or array from model output.

    Args:
        text: Raw completion text

    Returns:
        ParseOutcome holding the document, or a failure description
    """
    if not text or not text.strip():
        return ParseOutcome.failure("Model response is empty")

    value = _parse_full(text)
    if value is not None:
        return ParseOutcome.success(value, "full")

    value = _parse_scan(text)
    if value is not None:
        logger.debug("Recovered JSON object embedded in surrounding text")
        return ParseOutcome.success(value, "scan")

    preview = text.strip()[:120]
    return ParseOutcome.failure(f"No JSON document found in response: {preview!r}")


def parse_or_raise(text: str) -> Any:
    """Parse model output, raising UnparsableResponse on failure."""
    outcome = parse(text)
    if not outcome.ok:
        raise UnparsableResponse(outcome.error, text)
    return outcome.value
