"""Session persistence: token, profile snapshot and language preference."""

import structlog

from exam_pilot.errors import NoActiveSessionError
from exam_pilot.models.profile import Language, Profile
from exam_pilot.models.session import Session, new_token
from exam_pilot.storage.kv import LANGUAGE_KEY, PROFILE_KEY, TOKEN_KEY, KeyValueStore

logger = structlog.get_logger()


class SessionManager:
    """Owns the single active session and keeps it in step with storage.

    A token is never persisted without its profile: ``start`` writes the
    profile before the token and ``end`` removes the token first, so an
    interrupted write leaves state that ``restore`` treats as logged out.

    Args:
        store: Backing key-value store.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store
        self.session: Session | None = None

    @property
    def active(self) -> bool:
        return self.session is not None

    def language(self) -> Language:
        """Persisted language preference, ``en`` when unset or unreadable."""
        try:
            return Language(self.store.get(LANGUAGE_KEY, Language.EN.value))
        except ValueError:
            logger.warning("language_preference_invalid")
            return Language.EN

    def restore(self) -> Session | None:
        """Rebuild the session from storage; partial state means no session."""
        try:
            token = self.store.get(TOKEN_KEY)
            profile_data = self.store.get(PROFILE_KEY)
            if not token or not profile_data:
                return None
            session = Session(
                token=token, profile=Profile(**profile_data), language=self.language()
            )
        except (ValueError, TypeError):
            logger.warning("session_restore_failed")
            return None

        self.session = session
        logger.info("session_restored", user_id=session.profile.id)
        return self.session

    def start(self, profile: Profile) -> Session:
        """Begin a session for profile with a freshly minted token."""
        session = Session(token=new_token(), profile=profile, language=self.language())
        self.store.set(PROFILE_KEY, profile.model_dump(mode="json"))
        self.store.set(TOKEN_KEY, session.token)
        self.session = session
        logger.info("session_started", user_id=profile.id)
        return session

    def update(self, profile: Profile) -> Session:
        """Replace the persisted profile snapshot; the token is unchanged."""
        if self.session is None:
            raise NoActiveSessionError("No active session.")
        self.store.set(PROFILE_KEY, profile.model_dump(mode="json"))
        self.session = self.session.model_copy(update={"profile": profile})
        return self.session

    def end(self) -> None:
        """Clear the session keys. Safe to call when already logged out."""
        self.store.delete(TOKEN_KEY)
        self.store.delete(PROFILE_KEY)
        if self.session is not None:
            logger.info("session_ended", user_id=self.session.profile.id)
        self.session = None

    def set_language(self, language: Language) -> Language:
        """Persist the language preference and mirror it onto the active profile."""
        language = Language(language)
        self.store.set(LANGUAGE_KEY, language.value)
        if self.session is not None:
            profile = self.session.profile.model_copy(
                update={"preferred_language": language}
            )
            self.update(profile)
            self.session = self.session.model_copy(update={"language": language})
        return language
