"""Submission gate: daily quota admission check."""

from exam_pilot.errors import QuotaExceededError
from exam_pilot.models.profile import Profile, Tier

DAILY_FREE_LIMIT = 5


def can_submit(profile: Profile, daily_limit: int = DAILY_FREE_LIMIT) -> bool:
    """Premium is unlimited; free accounts get ``daily_limit`` questions."""
    return profile.tier == Tier.PREMIUM or profile.daily_questions < daily_limit


def remaining_questions(profile: Profile, daily_limit: int = DAILY_FREE_LIMIT) -> int | None:
    """Questions left today, or None for unlimited tiers."""
    if profile.tier == Tier.PREMIUM:
        return None
    return max(0, daily_limit - profile.daily_questions)


def ensure_can_submit(profile: Profile, daily_limit: int = DAILY_FREE_LIMIT) -> None:
    if not can_submit(profile, daily_limit):
        raise QuotaExceededError(
            f"Daily limit of {daily_limit} questions reached."
        )
