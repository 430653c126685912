"""Moment discovery: turn a video or an instruction into timestamped moments.

The two paths fail differently:

- discover_many (bulk) never raises. Any error yields the canned
  three-moment list with used_fallback set.
- discover_one (targeted) raises MomentNotFound with a reason.
"""

import logging
import time
from typing import Any, List, Optional

from models.moment import (
    BULK_SETTINGS,
    TARGETED_SETTINGS,
    DiscoveryResult,
    GenerationSettings,
    MomentRecord,
    RecordRejection,
    VideoRef,
)
from services import moment_validator, response_parser
from services.ai_service import TextModel
from services.prompts import (
    BULK_MOMENT_FINDER,
    PROMPT_VERSIONS,
    TARGETED_MOMENT_FINDER,
    TIME_HINT_ABSENT,
    TIME_HINT_PRESENT,
)
from utils.errors import MomentNotFound
from utils.timecode import extract_time_hint, format_hint

logger = logging.getLogger(__name__)

MOMENTS_LIST_KEY = "funniest_moments_list"

# Advisory duration windows; records outside them are kept
BULK_DURATION_RANGE = (8, 30)
TARGETED_DURATION_RANGE = (5, 15)

# Canned bulk result used when the model is unavailable or returns garbage
FALLBACK_MOMENTS: tuple = (
    MomentRecord(
        moment_id=1,
        description="Unexpected reaction to surprising event",
        timestamp_start="00:12:30",
        timestamp_end="00:12:39",
        duration_seconds=9,
        viral_rationale="The genuine surprise and over-the-top reaction is perfect for TikTok's reaction culture",
        caption_hook="When Monday hits you like...",
    ),
    MomentRecord(
        moment_id=2,
        description="Classic comedic timing with perfect punchline",
        timestamp_start="00:04:15",
        timestamp_end="00:04:25",
        duration_seconds=10,
        viral_rationale="The quick setup and delivery works well for short-form content",
        caption_hook="This is why I have trust issues 😂",
    ),
    MomentRecord(
        moment_id=3,
        description="Hilarious physical comedy moment",
        timestamp_start="00:08:45",
        timestamp_end="00:08:53",
        duration_seconds=8,
        viral_rationale="Physical humor translates well across audiences and doesn't need language context",
        caption_hook="My coordination level on a scale of 1-10",
    ),
)


def fallback_moments() -> List[MomentRecord]:
    """Return a fresh copy of the canned bulk result."""
    return list(FALLBACK_MOMENTS)


def build_bulk_prompt(video_ref: VideoRef) -> str:
    """Build the bulk discovery prompt for a video."""
    return BULK_MOMENT_FINDER.format(
        video_url=video_ref.source_url,
        video_info=f"Video ID: {video_ref.video_id}",
    )


def build_targeted_prompt(video_ref: VideoRef, instruction: str, moment_id: int) -> str:
    """Build the targeted discovery prompt, including any time hint."""
    hint = extract_time_hint(instruction)
    if hint is not None:
        time_hint_text = TIME_HINT_PRESENT.format(hint=format_hint(hint))
    else:
        time_hint_text = TIME_HINT_ABSENT

    return TARGETED_MOMENT_FINDER.format(
        video_url=video_ref.source_url,
        video_info=f"Video ID: {video_ref.video_id}",
        instruction=instruction.strip(),
        time_hint_text=time_hint_text,
        moment_id=moment_id,
    )


def _single_record(document: Any) -> Any:
    """Pick the moment out of a targeted response document."""
    if isinstance(document, dict) and isinstance(document.get(MOMENTS_LIST_KEY), list):
        document = document[MOMENTS_LIST_KEY]
    if isinstance(document, list):
        return document[0] if document else None
    return document


class MomentDiscoveryService:
    """Orchestrates model calls, parsing and validation for moment discovery."""

    def __init__(
        self,
        model: TextModel,
        bulk_settings: GenerationSettings = BULK_SETTINGS,
        targeted_settings: GenerationSettings = TARGETED_SETTINGS,
    ):
        """Initialize discovery service.

        Args:
            model: Text model used for both discovery paths
            bulk_settings: Sampling for discover_many (favors variety)
            targeted_settings: Sampling for discover_one (favors precision)
        """
        self.model = model
        self.bulk_settings = bulk_settings
        self.targeted_settings = targeted_settings

    @classmethod
    def from_config(cls, model: TextModel, config: dict) -> "MomentDiscoveryService":
        return cls(
            model=model,
            bulk_settings=GenerationSettings.from_config(config, "bulk"),
            targeted_settings=GenerationSettings.from_config(config, "targeted"),
        )

    async def analyze(self, video_ref: VideoRef) -> DiscoveryResult:
        """Bulk discovery with bookkeeping about fallback use.

        Never raises for model, parse or validation failures.
        """
        prompt = build_bulk_prompt(video_ref)
        logger.info(
            f"Discovering moments for {video_ref.video_id} "
            f"(prompt {PROMPT_VERSIONS['discover_many']})"
        )

        try:
            text = await self.model.generate(prompt, self.bulk_settings)
        except Exception as e:
            logger.error(f"Bulk discovery model call failed for {video_ref.video_id}: {e}")
            return self._fallback("model call failed")

        outcome = response_parser.parse(text)
        if not outcome.ok:
            logger.warning(f"Bulk discovery response unparsable: {outcome.error}")
            return self._fallback("unparsable response")

        document = outcome.value
        if isinstance(document, dict):
            raw_moments = document.get(MOMENTS_LIST_KEY)
        else:
            raw_moments = document
        if not isinstance(raw_moments, list):
            logger.warning(f"Bulk discovery response has no '{MOMENTS_LIST_KEY}' list")
            return self._fallback("missing moments list")

        moments, rejections = moment_validator.validate_many(raw_moments)
        if not moments:
            logger.warning(
                f"All {len(rejections)} proposed moments failed validation for {video_ref.video_id}"
            )
            return self._fallback("no valid moments")

        low, high = BULK_DURATION_RANGE
        for moment in moments:
            moment_validator.is_within_soft_range(moment, low, high)

        logger.info(
            f"Discovered {len(moments)} moments for {video_ref.video_id} "
            f"({len(rejections)} discarded)"
        )
        return DiscoveryResult(moments=moments, used_fallback=False, rejected_count=len(rejections))

    async def discover_many(self, video_ref: VideoRef) -> List[MomentRecord]:
        """Propose 5-8 candidate moments; falls back to canned moments on failure."""
        result = await self.analyze(video_ref)
        return result.moments

    async def discover_one(
        self, video_ref: VideoRef, instruction: str, moment_id: Optional[int] = None
    ) -> MomentRecord:
        """Find one moment matching a free-text instruction.

        Args:
            video_ref: Source video
            instruction: What the user is looking for, possibly with a timestamp
            moment_id: ID to assign; defaults to a millisecond timestamp

        Returns:
            Validated MomentRecord

        Raises:
            MomentNotFound: On empty instruction, model failure, parse failure or rejection
        """
        if not instruction or not instruction.strip():
            raise MomentNotFound("An instruction is required to find a moment", instruction)

        if moment_id is None:
            moment_id = int(time.time() * 1000)

        prompt = build_targeted_prompt(video_ref, instruction, moment_id)
        logger.info(f"Finding moment in {video_ref.video_id} for instruction: {instruction!r}")

        try:
            text = await self.model.generate(prompt, self.targeted_settings)
        except Exception as e:
            logger.error(f"Targeted discovery model call failed for {video_ref.video_id}: {e}")
            raise MomentNotFound(
                "Failed to find moment: the model request failed", instruction, reason="model-error"
            ) from e

        outcome = response_parser.parse(text)
        if not outcome.ok:
            logger.warning(f"Targeted discovery response unparsable: {outcome.error}")
            raise MomentNotFound(
                "Failed to extract moment information", instruction, reason="unparsable-response"
            )

        result = moment_validator.validate(_single_record(outcome.value), default_moment_id=moment_id)
        if isinstance(result, RecordRejection):
            logger.warning(f"Targeted moment rejected: {result.reason.value} ({result.message})")
            raise MomentNotFound(
                f"Invalid moment returned: {result.message}", instruction, reason=result.reason.value
            )

        low, high = TARGETED_DURATION_RANGE
        moment_validator.is_within_soft_range(result, low, high)
        return result

    def _fallback(self, cause: str) -> DiscoveryResult:
        logger.info(f"Using fallback moments ({cause})")
        return DiscoveryResult(moments=fallback_moments(), used_fallback=True)
