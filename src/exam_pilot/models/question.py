"""Question and explanation models."""

import time
import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from exam_pilot.models.profile import Subject


def new_question_id() -> str:
    """Time-ordered identifier: zero-padded nanosecond clock plus a random suffix."""
    return f"{time.time_ns():020d}-{uuid.uuid4().hex[:8]}"


class Explanation(BaseModel):
    """A parsed step-by-step answer."""

    steps: list[str] = Field(default_factory=list)
    final_answer: str = ""


class QuestionRecord(BaseModel):
    """A single answered question in the history log."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_question_id)
    question: str
    steps: tuple[str, ...] = ()
    final_answer: str = ""
    subject: Subject
    from_image: bool = False
    created_at: datetime = Field(default_factory=datetime.now)
