"""Session data models."""

import uuid

from pydantic import BaseModel, Field

from exam_pilot.models.profile import Language, Profile


def new_token() -> str:
    return f"token-{uuid.uuid4().hex}"


class Session(BaseModel):
    """The single authenticated session held by the session manager."""

    token: str = Field(default_factory=new_token)
    profile: Profile
    language: Language = Language.EN
