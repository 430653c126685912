"""Unit tests for moment record validation."""

import pytest

from models.moment import MomentRecord, RecordRejection, RejectionReason
from services.moment_validator import (
    is_within_soft_range,
    validate,
    validate_many,
    validate_or_raise,
)
from utils.errors import RecordValidationError


@pytest.mark.unit
class TestValidate:
    """Tests for validate()."""

    def test_accepts_consistent_record(self, raw_moment):
        result = validate(raw_moment)

        assert isinstance(result, MomentRecord)
        assert result.moment_id == 1
        assert result.timestamp_start == "00:02:35"
        assert result.duration_seconds == 12
        assert result.viral_rationale == raw_moment["why_its_tiktok_funny"]
        assert result.caption_hook == raw_moment["suggested_caption_hook"]

    def test_normalizes_short_timecodes(self, raw_moment):
        raw_moment.update(timestamp_start="2:35", timestamp_end="2:47")

        result = validate(raw_moment)

        assert result.timestamp_start == "00:02:35"
        assert result.timestamp_end == "00:02:47"

    def test_accepts_integral_float_duration(self, raw_moment):
        raw_moment["duration_seconds"] = 12.0
        assert isinstance(validate(raw_moment), MomentRecord)

    def test_duration_mismatch(self, raw_moment):
        raw_moment["duration_seconds"] = 10

        result = validate(raw_moment)

        assert isinstance(result, RecordRejection)
        assert result.reason is RejectionReason.DURATION_MISMATCH
        assert result.field == "duration_seconds"

    def test_end_before_start_is_bad_order(self, raw_moment):
        raw_moment.update(timestamp_start="00:02:47", timestamp_end="00:02:35", duration_seconds=-12)

        result = validate(raw_moment)

        assert result.reason is RejectionReason.BAD_ORDER

    def test_empty_span_is_bad_order(self, raw_moment):
        raw_moment.update(timestamp_end="00:02:35", duration_seconds=0)
        assert validate(raw_moment).reason is RejectionReason.BAD_ORDER

    def test_missing_field(self, raw_moment):
        del raw_moment["suggested_caption_hook"]

        result = validate(raw_moment)

        assert result.reason is RejectionReason.MISSING_FIELD
        assert result.field == "suggested_caption_hook"

    def test_null_field_counts_as_missing(self, raw_moment):
        raw_moment["description"] = None
        assert validate(raw_moment).reason is RejectionReason.MISSING_FIELD

    def test_missing_id_uses_default(self, raw_moment):
        del raw_moment["moment_id"]

        assert validate(raw_moment).reason is RejectionReason.MISSING_FIELD
        assert validate(raw_moment, default_moment_id=42).moment_id == 42

    @pytest.mark.parametrize(
        "field,value",
        [
            ("moment_id", "one"),
            ("moment_id", True),
            ("duration_seconds", "12"),
            ("duration_seconds", 12.5),
            ("description", ""),
            ("why_its_tiktok_funny", 5),
        ],
    )
    def test_bad_types(self, raw_moment, field, value):
        raw_moment[field] = value

        result = validate(raw_moment)

        assert result.reason is RejectionReason.BAD_TYPE
        assert result.field == field

    def test_malformed_timecode(self, raw_moment):
        raw_moment["timestamp_end"] = "two minutes"

        result = validate(raw_moment)

        assert result.reason is RejectionReason.MALFORMED_TIMECODE
        assert result.field == "timestamp_end"

    @pytest.mark.parametrize("raw", [None, "moment", 3, ["a", "b"]])
    def test_not_an_object(self, raw):
        assert validate(raw).reason is RejectionReason.NOT_AN_OBJECT

    def test_validate_or_raise(self, raw_moment):
        raw_moment["duration_seconds"] = 99

        with pytest.raises(RecordValidationError) as exc_info:
            validate_or_raise(raw_moment)

        assert exc_info.value.reason == "duration-mismatch"
        assert exc_info.value.to_dict()["reason"] == "duration-mismatch"


@pytest.mark.unit
class TestValidateMany:
    """Tests for validate_many()."""

    def test_keeps_valid_and_discards_invalid(self, raw_moments):
        raw_moments[1]["duration_seconds"] = 3
        raw_moments[3] = "not a moment"

        accepted, rejections = validate_many(raw_moments)

        assert [m.moment_id for m in accepted] == [1, 3, 5]
        assert [r.reason for r in rejections] == [
            RejectionReason.DURATION_MISMATCH,
            RejectionReason.NOT_AN_OBJECT,
        ]

    def test_missing_ids_get_positions(self, raw_moments):
        for raw in raw_moments:
            del raw["moment_id"]

        accepted, _ = validate_many(raw_moments)

        assert [m.moment_id for m in accepted] == [1, 2, 3, 4, 5]

    def test_duplicate_ids_are_rejected(self, raw_moments):
        raw_moments[2]["moment_id"] = 1

        accepted, rejections = validate_many(raw_moments)

        assert len(accepted) == 4
        assert len(rejections) == 1
        assert "Duplicate" in rejections[0].message


@pytest.mark.unit
def test_soft_range_is_advisory(moment):
    assert is_within_soft_range(moment, 8, 30) is True
    assert is_within_soft_range(moment, 5, 10) is False
