"""Error taxonomy for the tutoring core.

Every error is recoverable: the active session stays usable after any of them.
"""


class ExamPilotError(Exception):
    """Base class for all tutoring core errors."""


class ValidationError(ExamPilotError):
    """Malformed user input (signup fields, empty question)."""


class DuplicateAccountError(ExamPilotError):
    """An account with this email already exists."""


class NotFoundError(ExamPilotError):
    """No account is registered under this email."""


class InvalidCredentialError(ExamPilotError):
    """Password does not match the stored credential."""


class QuotaExceededError(ExamPilotError):
    """Daily free quota reached; the caller should offer an upgrade."""


class ServiceUnavailableError(ExamPilotError):
    """The explanation service failed or returned no usable content."""


class NoActiveSessionError(ExamPilotError):
    """An operation needs a logged-in session and none is active."""


class SubmissionInProgressError(ExamPilotError):
    """A question is already waiting on the explanation service."""


class StorageError(ExamPilotError):
    """Persisted data exists but cannot be read."""
