"""Conversion between HH:MM:SS style timecodes and integer seconds."""

import re
from typing import Optional

from utils.errors import MalformedTimecode

# First "M:SS", "MM:SS" or "H:MM:SS" shaped substring in free text
TIME_HINT_PATTERN = re.compile(r"(\d{1,2}):(\d{2})(?::(\d{2}))?")


def to_seconds(text: str) -> int:
    """Convert an ``MM:SS`` or ``HH:MM:SS`` timecode to seconds.

    Args:
        text: Timecode string

    Returns:
        Total seconds

    Raises:
        MalformedTimecode: On wrong segment count or a non-numeric part
    """
    if not isinstance(text, str):
        raise MalformedTimecode(f"Timecode must be a string, got {type(text).__name__}", text)

    parts = text.strip().split(":")
    if len(parts) not in (2, 3):
        raise MalformedTimecode(f"Expected MM:SS or HH:MM:SS, got '{text}'", text)

    values = []
    for part in parts:
        if not (part.isascii() and part.isdigit()):
            raise MalformedTimecode(f"Non-numeric timecode component '{part}' in '{text}'", text)
        values.append(int(part))

    if len(values) == 2:
        minutes, seconds = values
        return minutes * 60 + seconds

    hours, minutes, seconds = values
    return hours * 3600 + minutes * 60 + seconds


def to_timecode(seconds: int) -> str:
    """Convert seconds to a zero-padded ``HH:MM:SS`` timecode."""
    if isinstance(seconds, bool) or not isinstance(seconds, int) or seconds < 0:
        raise MalformedTimecode(f"Cannot format {seconds!r} as a timecode", seconds)

    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def normalize_timecode(text: str) -> str:
    """Normalize any accepted timecode to the three-segment form."""
    return to_timecode(to_seconds(text))


def extract_time_hint(instruction: str) -> Optional[int]:
    """Find the first timestamp mentioned in free text.

    "find the dog jumping in the pool around 2:35" -> 155. Later timestamps
    in the same text are ignored.

    Returns:
        Seconds, or None when the text mentions no timestamp
    """
    if not instruction:
        return None

    match = TIME_HINT_PATTERN.search(instruction)
    if not match:
        return None

    first, second, third = match.groups()
    if third is not None:
        return int(first) * 3600 + int(second) * 60 + int(third)
    return int(first) * 60 + int(second)


def format_hint(seconds: int) -> str:
    """Format seconds as ``M:SS`` for prompt text (155 -> "2:35")."""
    minutes, secs = divmod(seconds, 60)
    return f"{minutes}:{secs:02d}"
