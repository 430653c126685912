"""Video URL resolution: canonical YouTube video IDs from any URL shape."""

import logging
import re
from typing import Optional
from urllib.parse import parse_qs, urlparse

from models.moment import VideoRef
from utils.errors import InvalidVideoUrl

logger = logging.getLogger(__name__)

VIDEO_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{11}$")

SHORT_HOSTS = ("youtu.be",)
LONG_HOSTS = ("youtube.com", "youtube-nocookie.com")

# Path prefixes that carry the ID as the next segment, in priority order
PATH_FORMS = ("embed", "shorts", "v", "live")


def _host_matches(host: str, candidates: tuple) -> bool:
    return any(host == c or host.endswith("." + c) for c in candidates)


def _int_param(query: dict, name: str) -> Optional[int]:
    values = query.get(name)
    if not values:
        return None
    value = values[0].rstrip("s")
    return int(value) if value.isdigit() else None


def resolve(url: str) -> VideoRef:
    """Resolve a YouTube URL into a VideoRef.

    Recognized, in priority order: ``youtu.be/<id>``, ``/embed/<id>`` (plus
    ``/shorts/``, ``/v/`` and ``/live/``), then ``watch?v=<id>``.

    Args:
        url: User-supplied URL

    Returns:
        VideoRef with the 11-character video ID and any embed offsets

    Raises:
        InvalidVideoUrl: When no video ID can be located
    """
    if not url or not isinstance(url, str) or not url.strip():
        raise InvalidVideoUrl("Video URL is required", url)

    raw = url.strip()
    if "://" not in raw:
        raw = "https://" + raw

    parsed = urlparse(raw)
    host = (parsed.hostname or "").lower()
    query = parse_qs(parsed.query)
    segments = [s for s in parsed.path.split("/") if s]

    candidate = None
    if _host_matches(host, SHORT_HOSTS):
        candidate = segments[0] if segments else None
    elif _host_matches(host, LONG_HOSTS):
        if len(segments) >= 2 and segments[0] in PATH_FORMS:
            candidate = segments[1]
        elif query.get("v"):
            candidate = query["v"][0]
    else:
        raise InvalidVideoUrl(f"Not a YouTube URL: {url}", url)

    if not candidate or not VIDEO_ID_PATTERN.match(candidate):
        raise InvalidVideoUrl(f"Could not extract video ID from URL: {url}", url)

    start = _int_param(query, "start")
    if start is None:
        start = _int_param(query, "t")
    end = _int_param(query, "end")

    logger.debug(f"Resolved {url} -> {candidate} (start={start}, end={end})")
    return VideoRef(
        video_id=candidate,
        source_url=url,
        start_seconds=start,
        end_seconds=end,
    )


def watch_url(video_id: str, start_seconds: Optional[int] = None) -> str:
    """Build a shareable watch URL, optionally starting at an offset."""
    url = f"https://www.youtube.com/watch?v={video_id}"
    if start_seconds is not None:
        url += f"&t={start_seconds}s"
    return url


def embed_url(video_id: str, start_seconds: int, end_seconds: int) -> str:
    """Build an embeddable player URL bounded to a segment."""
    return (
        f"https://www.youtube.com/embed/{video_id}"
        f"?start={start_seconds}&end={end_seconds}&autoplay=1"
    )


def thumbnail_url(video_id: str) -> str:
    """Conventional max-resolution thumbnail URL, derived from the ID alone."""
    return f"https://i.ytimg.com/vi/{video_id}/maxresdefault.jpg"
