"""Gamification state transitions.

All functions here are pure: they return a new ``Profile`` and never touch
the one passed in, so replaying the same input always gives the same output.
"""

from exam_pilot.gamification.badges import BADGE_RULES
from exam_pilot.models.profile import Profile, Subject, Tier

XP_PER_QUESTION = 10


def evaluate_badges(profile: Profile) -> list[str]:
    """Return the profile's badges plus any newly satisfied ones.

    Held badges are kept even when their predicate no longer holds.
    """
    badges = list(profile.badges)
    for badge_id, predicate in BADGE_RULES:
        if badge_id not in badges and predicate(profile):
            badges.append(badge_id)
    return badges


def _with_badges(profile: Profile) -> Profile:
    return profile.model_copy(update={"badges": evaluate_badges(profile)})


def apply_question_completed(profile: Profile, subject: Subject) -> Profile:
    """Score one answered question.

    Args:
        profile: Profile before the question.
        subject: Subject of the answered question. Scoring is the same for
            every subject.

    Returns:
        Updated profile with counters, XP, level and badges advanced.
    """
    updated = profile.model_copy(
        update={
            "total_questions": profile.total_questions + 1,
            "daily_questions": profile.daily_questions + 1,
            "xp": profile.xp + XP_PER_QUESTION,
            "badges": list(profile.badges),
        }
    )
    return _with_badges(updated)


def apply_upgrade(profile: Profile) -> Profile:
    """Move the profile to the premium tier and award tier badges."""
    return _with_badges(
        profile.model_copy(update={"tier": Tier.PREMIUM, "badges": list(profile.badges)})
    )


def new_badges(before: Profile, after: Profile) -> list[str]:
    """Badges present on ``after`` that ``before`` did not hold, in award order."""
    held = set(before.badges)
    return [badge_id for badge_id in after.badges if badge_id not in held]
