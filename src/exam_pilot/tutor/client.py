"""Tutor client - central context object connecting all components.

Data flow for a question:
submission gate -> explanation service -> parser -> gamification engine
-> history log -> session persistence.
"""

import structlog
from pydantic import BaseModel, Field

from exam_pilot.config import Settings
from exam_pilot.errors import (
    NoActiveSessionError,
    ServiceUnavailableError,
    SubmissionInProgressError,
    ValidationError,
)
from exam_pilot.gamification.badges import badge_collection
from exam_pilot.gamification.engine import apply_question_completed, apply_upgrade, new_badges
from exam_pilot.models.profile import Language, Profile, Subject
from exam_pilot.models.question import QuestionRecord
from exam_pilot.models.session import Session
from exam_pilot.storage.accounts import AccountStore
from exam_pilot.storage.history import HistoryLog
from exam_pilot.storage.kv import KeyValueStore
from exam_pilot.storage.session import SessionManager
from exam_pilot.tutor.explainer import Explainer
from exam_pilot.tutor.gate import DAILY_FREE_LIMIT, ensure_can_submit
from exam_pilot.tutor.messages import message
from exam_pilot.tutor.parser import parse_explanation
from exam_pilot.tutor.prompts import fallback_explanation

logger = structlog.get_logger()

IMAGE_QUESTION_TEXT = "Image question"


class AskResult(BaseModel):
    """Outcome of a successfully answered question."""

    record: QuestionRecord
    profile: Profile
    new_badges: list[str] = Field(default_factory=list)
    used_fallback: bool = False


class TutorClient:
    """Owns the stores, the active session and the pending-request flag.

    Call ``open`` once to restore any persisted session and ``close`` to
    release the explanation client.

    Args:
        store: Key-value store shared by accounts, session and history.
        explainer: Explanation service client.
        daily_limit: Free-tier questions allowed per day.
    """

    def __init__(
        self,
        store: KeyValueStore,
        explainer: Explainer,
        daily_limit: int = DAILY_FREE_LIMIT,
    ):
        self.store = store
        self.explainer = explainer
        self.daily_limit = daily_limit
        self.accounts = AccountStore(store)
        self.sessions = SessionManager(store)
        self.history_log = HistoryLog(store)
        self.pending = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "TutorClient":
        explainer = Explainer(
            api_key=settings.openai_api_key,
            model=settings.explanation_model,
            temperature=settings.explanation_temperature,
            max_tokens=settings.explanation_max_tokens,
            timeout=settings.explanation_timeout_seconds,
        )
        return cls(
            KeyValueStore(settings.storage_dir),
            explainer,
            daily_limit=settings.daily_free_limit,
        )

    def open(self) -> Session | None:
        return self.sessions.restore()

    async def close(self) -> None:
        await self.explainer.close()

    @property
    def session(self) -> Session | None:
        return self.sessions.session

    @property
    def language(self) -> Language:
        if self.session is not None:
            return self.session.language
        return self.sessions.language()

    def _require_session(self) -> Session:
        if self.session is None:
            raise NoActiveSessionError("Please log in first.")
        return self.session

    # Account lifecycle

    def signup(self, email: str, password: str, name: str) -> Session:
        profile = self.accounts.signup(email, password, name)
        return self.sessions.start(profile)

    def login(self, email: str, password: str) -> Session:
        profile = self.accounts.login(email, password)
        return self.sessions.start(profile)

    def logout(self) -> None:
        self.sessions.end()

    def toggle_language(self) -> Language:
        new_language = Language.AR if self.language == Language.EN else Language.EN
        return self.sessions.set_language(new_language)

    def set_language(self, language: Language) -> Language:
        return self.sessions.set_language(language)

    def upgrade(self) -> Profile:
        """Switch the active profile to premium."""
        profile = apply_upgrade(self._require_session().profile)
        self.sessions.update(profile)
        logger.info("profile_upgraded", user_id=profile.id)
        return profile

    # Questions and progress

    def history(self) -> list[QuestionRecord]:
        return self.history_log.all()

    def badges(self) -> list[dict]:
        return badge_collection(self._require_session().profile)

    async def ask(
        self,
        question: str,
        subject: Subject,
        image: str | None = None,
    ) -> AskResult:
        """Submit a question and score it.

        Args:
            question: Question text; may be empty when an image is given.
            subject: One of the supported subjects.
            image: Optional image as a data URL.

        Raises:
            NoActiveSessionError: Nobody is logged in, or the session changed
                while the explanation was pending (the answer is discarded).
            ValidationError: Neither text nor image was given.
            SubmissionInProgressError: A previous question is still pending.
            QuotaExceededError: The free daily quota is used up.
        """
        session = self._require_session()
        language = session.language
        question = (question or "").strip()
        image = image or None
        if not question and not image:
            raise ValidationError(message("empty_question", language))
        subject = Subject(subject)
        if self.pending:
            raise SubmissionInProgressError("A question is already being answered.")
        ensure_can_submit(session.profile, self.daily_limit)

        self.pending = True
        try:
            used_fallback = False
            try:
                raw = await self.explainer.explain(
                    question or IMAGE_QUESTION_TEXT, subject, language, image=image
                )
            except ServiceUnavailableError:
                logger.warning("explanation_fallback_used", subject=subject.value)
                raw = fallback_explanation(language)
                used_fallback = True

            parsed = parse_explanation(raw)
            record = QuestionRecord(
                question=question or message("image_question", language),
                steps=tuple(parsed.steps),
                final_answer=parsed.final_answer,
                subject=subject,
                from_image=image is not None,
            )
            current = self.session
            if current is None or current.token != session.token:
                logger.warning("answer_discarded_session_changed", subject=subject.value)
                raise NoActiveSessionError("The session changed before the answer arrived.")
            before = current.profile
            after = apply_question_completed(before, subject)
            self.history_log.append(record)
            self.sessions.update(after)
        finally:
            self.pending = False

        earned = new_badges(before, after)
        logger.info(
            "question_answered",
            user_id=after.id,
            subject=subject.value,
            xp=after.xp,
            level=after.level,
            new_badges=earned,
            used_fallback=used_fallback,
        )
        return AskResult(
            record=record, profile=after, new_badges=earned, used_fallback=used_fallback
        )
