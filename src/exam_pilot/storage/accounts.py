"""Account store: email -> credential record, with signup/login validation."""

import structlog
from pydantic import BaseModel
from werkzeug.security import check_password_hash, generate_password_hash

from exam_pilot.errors import (
    DuplicateAccountError,
    InvalidCredentialError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from exam_pilot.models.profile import Profile
from exam_pilot.storage.kv import ACCOUNTS_KEY, KeyValueStore

logger = structlog.get_logger()

MIN_PASSWORD_LENGTH = 6


class CredentialRecord(BaseModel):
    """Stored account; never leaves the account store."""

    email: str
    password_hash: str
    profile: Profile


class AccountStore:
    """Registers and authenticates accounts keyed by email.

    Emails are compared exactly as stored (case-sensitive). Only the
    password-free ``Profile`` is returned to callers.

    Args:
        store: Backing key-value store.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    def _load(self) -> dict[str, CredentialRecord]:
        try:
            raw = self.store.get(ACCOUNTS_KEY, {}) or {}
            return {email: CredentialRecord(**record) for email, record in raw.items()}
        except (ValueError, TypeError, AttributeError) as e:
            logger.error("accounts_unreadable")
            raise StorageError("Account data is unreadable.") from e

    def _save(self, accounts: dict[str, CredentialRecord]) -> None:
        self.store.set(
            ACCOUNTS_KEY,
            {email: record.model_dump(mode="json") for email, record in accounts.items()},
        )

    def signup(self, email: str, password: str, name: str) -> Profile:
        """Create an account and return its fresh profile.

        Raises:
            ValidationError: A field is empty or the password is too short.
            DuplicateAccountError: The email is already registered.
        """
        if not email or not email.strip() or not password or not name or not name.strip():
            raise ValidationError("Please fill in all fields.")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
            )

        accounts = self._load()
        if email in accounts:
            raise DuplicateAccountError("Email already registered. Please log in.")

        profile = Profile(email=email, name=name)
        accounts[email] = CredentialRecord(
            email=email,
            password_hash=generate_password_hash(password),
            profile=profile,
        )
        self._save(accounts)
        logger.info("account_created", user_id=profile.id)
        return profile.model_copy(deep=True)

    def login(self, email: str, password: str) -> Profile:
        """Authenticate and return the stored profile.

        Raises:
            NotFoundError: No account for this email.
            InvalidCredentialError: Wrong password.
        """
        record = self._load().get(email)
        if record is None:
            raise NotFoundError("No account found. Please sign up first.")
        if not check_password_hash(record.password_hash, password):
            logger.info("login_rejected", user_id=record.profile.id)
            raise InvalidCredentialError("Wrong password. Try again.")
        return record.profile.model_copy(deep=True)

    def __contains__(self, email: str) -> bool:
        return email in self._load()

    def __len__(self) -> int:
        return len(self._load())
