"""Badge catalog: static definitions plus the predicate that earns each one."""

from collections.abc import Callable

from pydantic import BaseModel

from exam_pilot.models.profile import Profile, Tier


class Badge(BaseModel):
    """Display metadata for an achievement badge."""

    id: str
    name: str
    icon: str
    description: str


BADGES: list[Badge] = [
    Badge(id="first_question", name="First Steps", icon="🎯", description="Asked your first question"),
    Badge(id="streak_3", name="On Fire", icon="🔥", description="3-day streak"),
    Badge(id="streak_7", name="Unstoppable", icon="⚡", description="7-day streak"),
    Badge(id="streak_30", name="Legend", icon="👑", description="30-day streak"),
    Badge(id="questions_10", name="Curious Mind", icon="🧠", description="Solved 10 questions"),
    Badge(id="questions_50", name="Scholar", icon="📚", description="Solved 50 questions"),
    Badge(id="questions_100", name="Master", icon="🏆", description="Solved 100 questions"),
    Badge(id="premium", name="VIP", icon="💎", description="Upgraded to Premium"),
]

BADGES_BY_ID: dict[str, Badge] = {badge.id: badge for badge in BADGES}

# Evaluated in catalog order so award order is stable.
BADGE_RULES: list[tuple[str, Callable[[Profile], bool]]] = [
    ("first_question", lambda p: p.total_questions == 1),
    ("streak_3", lambda p: p.streak >= 3),
    ("streak_7", lambda p: p.streak >= 7),
    ("streak_30", lambda p: p.streak >= 30),
    ("questions_10", lambda p: p.total_questions >= 10),
    ("questions_50", lambda p: p.total_questions >= 50),
    ("questions_100", lambda p: p.total_questions >= 100),
    ("premium", lambda p: p.tier == Tier.PREMIUM),
]


def get_badge(badge_id: str) -> Badge | None:
    return BADGES_BY_ID.get(badge_id)


def badge_collection(profile: Profile) -> list[dict]:
    """Whole catalog with an ``earned`` flag for the profile's badges."""
    earned = set(profile.badges)
    return [
        {**badge.model_dump(), "earned": badge.id in earned}
        for badge in BADGES
    ]
