"""Learner profile model tracking progress across sessions."""

import uuid
from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field, computed_field

XP_PER_LEVEL = 100


class Tier(StrEnum):
    """Subscription tiers; premium removes the daily quota."""

    FREE = "free"
    PREMIUM = "premium"


class Language(StrEnum):
    """Supported interface and explanation locales."""

    EN = "en"
    AR = "ar"


class Subject(StrEnum):
    """Question subjects accepted by the tutor."""

    MATH = "math"
    PHYSICS = "physics"
    CHEMISTRY = "chemistry"


def level_for_xp(xp: int) -> int:
    """Level derived from experience points (level 1 starts at 0 XP)."""
    return xp // XP_PER_LEVEL + 1


def new_user_id() -> str:
    return f"user-{uuid.uuid4().hex}"


class Profile(BaseModel):
    id: str = Field(default_factory=new_user_id)
    email: str
    name: str
    tier: Tier = Tier.FREE
    daily_questions: int = Field(default=0, ge=0)
    total_questions: int = Field(default=0, ge=0)
    streak: int = Field(default=0, ge=0)
    last_active: datetime = Field(default_factory=datetime.now)
    xp: int = Field(default=0, ge=0)
    badges: list[str] = Field(default_factory=list)
    preferred_language: Language = Language.EN

    @computed_field
    @property
    def level(self) -> int:
        return level_for_xp(self.xp)

    @property
    def xp_into_level(self) -> int:
        """XP earned inside the current level (0-99)."""
        return self.xp % XP_PER_LEVEL

    @property
    def is_premium(self) -> bool:
        return self.tier == Tier.PREMIUM
