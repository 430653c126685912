"""Schema and consistency checks for raw moment records.

The validator never raises for malformed input. It returns either a
MomentRecord or a RecordRejection naming the first failing invariant, so
bulk discovery can discard-and-continue while targeted discovery can fail
the request.
"""

import logging
from numbers import Integral, Real
from typing import Any, Iterable, List, Optional, Tuple, Union

from models.moment import MOMENT_FIELDS, MomentRecord, RecordRejection, RejectionReason
from utils.errors import MalformedTimecode, RecordValidationError
from utils.timecode import to_seconds, to_timecode

logger = logging.getLogger(__name__)

TEXT_FIELDS = (
    "description",
    "why_its_tiktok_funny",
    "suggested_caption_hook",
)
REQUIRED_FIELDS = MOMENT_FIELDS


def _as_integer(value: Any) -> Optional[int]:
    """Accept ints and integral floats; reject bools, strings and fractions."""
    if isinstance(value, bool):
        return None
    if isinstance(value, Integral):
        return int(value)
    if isinstance(value, Real) and float(value).is_integer():
        return int(value)
    return None


def _reject(reason: RejectionReason, message: str, field: Optional[str] = None) -> RecordRejection:
    return RecordRejection(reason=reason, message=message, field=field)


def validate(
    raw: Any, default_moment_id: Optional[int] = None
) -> Union[MomentRecord, RecordRejection]:
    """Validate one raw record produced by the model.

    Args:
        raw: Parsed JSON value for a single moment
        default_moment_id: ID to use when the record has none

    Returns:
        MomentRecord on success, RecordRejection otherwise
    """
    if not isinstance(raw, dict):
        return _reject(
            RejectionReason.NOT_AN_OBJECT,
            f"Moment must be an object, got {type(raw).__name__}",
        )

    # Presence
    for name in REQUIRED_FIELDS:
        if name == "moment_id" and default_moment_id is not None:
            continue
        if raw.get(name) is None:
            return _reject(RejectionReason.MISSING_FIELD, f"Missing field '{name}'", name)

    # Types
    if raw.get("moment_id") is None:
        moment_id = default_moment_id
    else:
        moment_id = _as_integer(raw["moment_id"])
        if moment_id is None:
            return _reject(RejectionReason.BAD_TYPE, "moment_id must be an integer", "moment_id")

    duration = _as_integer(raw["duration_seconds"])
    if duration is None:
        return _reject(
            RejectionReason.BAD_TYPE,
            f"duration_seconds must be a whole number, got {raw['duration_seconds']!r}",
            "duration_seconds",
        )

    for name in TEXT_FIELDS:
        value = raw[name]
        if not isinstance(value, str) or not value.strip():
            return _reject(RejectionReason.BAD_TYPE, f"'{name}' must be non-empty text", name)

    # Timecodes
    try:
        start = to_seconds(raw["timestamp_start"])
    except MalformedTimecode as e:
        return _reject(RejectionReason.MALFORMED_TIMECODE, e.message, "timestamp_start")
    try:
        end = to_seconds(raw["timestamp_end"])
    except MalformedTimecode as e:
        return _reject(RejectionReason.MALFORMED_TIMECODE, e.message, "timestamp_end")

    # Ordering before arithmetic: a reversed span can never have a valid duration
    if end <= start:
        return _reject(
            RejectionReason.BAD_ORDER,
            f"End {raw['timestamp_end']} is not after start {raw['timestamp_start']}",
            "timestamp_end",
        )

    if duration != end - start:
        return _reject(
            RejectionReason.DURATION_MISMATCH,
            f"duration_seconds is {duration} but timestamps span {end - start}s",
            "duration_seconds",
        )

    return MomentRecord(
        moment_id=moment_id,
        description=raw["description"].strip(),
        timestamp_start=to_timecode(start),
        timestamp_end=to_timecode(end),
        duration_seconds=duration,
        viral_rationale=raw["why_its_tiktok_funny"].strip(),
        caption_hook=raw["suggested_caption_hook"].strip(),
    )


def validate_or_raise(raw: Any, default_moment_id: Optional[int] = None) -> MomentRecord:
    """Validate a record, raising RecordValidationError on rejection."""
    result = validate(raw, default_moment_id=default_moment_id)
    if isinstance(result, RecordRejection):
        raise RecordValidationError(result.message, result.reason.value, result.field)
    return result


def validate_many(raw_records: Iterable[Any]) -> Tuple[List[MomentRecord], List[RecordRejection]]:
    """Validate a list of records, keeping accepted and rejected apart.

    Records without an ID get their 1-based position. Duplicate IDs are
    rejected so IDs stay unique within the result set.
    """
    accepted: List[MomentRecord] = []
    rejections: List[RecordRejection] = []
    seen_ids = set()

    for position, raw in enumerate(raw_records, start=1):
        result = validate(raw, default_moment_id=position)
        if isinstance(result, RecordRejection):
            logger.warning(f"Discarding moment #{position}: {result.reason.value} ({result.message})")
            rejections.append(result)
            continue
        if result.moment_id in seen_ids:
            rejection = _reject(
                RejectionReason.BAD_TYPE,
                f"Duplicate moment_id {result.moment_id}",
                "moment_id",
            )
            logger.warning(f"Discarding moment #{position}: {rejection.message}")
            rejections.append(rejection)
            continue
        seen_ids.add(result.moment_id)
        accepted.append(result)

    return accepted, rejections


def is_within_soft_range(record: MomentRecord, low: int, high: int) -> bool:
    """Check the advisory duration window; out-of-range moments are kept."""
    within = low <= record.duration_seconds <= high
    if not within:
        logger.info(
            f"Moment {record.moment_id} lasts {record.duration_seconds}s, "
            f"outside the {low}-{high}s target"
        )
    return within
