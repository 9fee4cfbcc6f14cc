"""REST API routes exposing the tutor client to the browser front end."""

import structlog
from fastapi import APIRouter, Depends, FastAPI, Header, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from exam_pilot.errors import (
    DuplicateAccountError,
    ExamPilotError,
    InvalidCredentialError,
    NoActiveSessionError,
    NotFoundError,
    QuotaExceededError,
    ServiceUnavailableError,
    StorageError,
    SubmissionInProgressError,
    ValidationError,
)
from exam_pilot.gamification.badges import get_badge
from exam_pilot.models.profile import Language, Subject
from exam_pilot.models.session import Session
from exam_pilot.tutor.client import TutorClient
from exam_pilot.tutor.gate import remaining_questions
from exam_pilot.tutor.messages import message

logger = structlog.get_logger()
router = APIRouter(prefix="/api")

ERROR_STATUS: dict[type[ExamPilotError], int] = {
    ValidationError: 400,
    InvalidCredentialError: 401,
    NoActiveSessionError: 401,
    QuotaExceededError: 402,
    NotFoundError: 404,
    DuplicateAccountError: 409,
    SubmissionInProgressError: 409,
    ServiceUnavailableError: 503,
    StorageError: 503,
}


class SignupRequest(BaseModel):
    email: str
    password: str
    name: str


class LoginRequest(BaseModel):
    email: str
    password: str


class LanguageRequest(BaseModel):
    language: Language | None = None  # None toggles


class QuestionRequest(BaseModel):
    question: str = ""
    subject: Subject = Subject.MATH
    image: str | None = None


def get_tutor(request: Request) -> TutorClient:
    return request.app.state.tutor


def require_session(
    tutor: TutorClient = Depends(get_tutor),
    x_session_token: str | None = Header(default=None),
) -> Session:
    """Resolve the active session, checking the caller's token."""
    session = tutor.session
    if session is None or x_session_token != session.token:
        raise NoActiveSessionError("Please log in first.")
    return session


def _session_payload(session: Session, tutor: TutorClient, greeting: str) -> dict:
    return {
        "token": session.token,
        "language": session.language.value,
        "profile": session.profile.model_dump(mode="json"),
        "remaining_questions": remaining_questions(session.profile, tutor.daily_limit),
        "message": message(greeting, session.language),
    }


async def handle_exam_pilot_error(request: Request, exc: ExamPilotError) -> JSONResponse:
    status = next(
        (code for cls, code in ERROR_STATUS.items() if isinstance(exc, cls)), 400
    )
    detail = str(exc)
    if isinstance(exc, QuotaExceededError):
        detail = message("upgrade_prompt", get_tutor(request).language)
    logger.info("request_rejected", error=type(exc).__name__, status=status)
    return JSONResponse({"detail": detail, "error": type(exc).__name__}, status_code=status)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ExamPilotError, handle_exam_pilot_error)


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}


@router.post("/signup")
async def signup(body: SignupRequest, tutor: TutorClient = Depends(get_tutor)) -> dict:
    session = tutor.signup(body.email, body.password, body.name)
    return _session_payload(session, tutor, "account_created")


@router.post("/login")
async def login(body: LoginRequest, tutor: TutorClient = Depends(get_tutor)) -> dict:
    session = tutor.login(body.email, body.password)
    return _session_payload(session, tutor, "welcome")


@router.post("/logout")
async def logout(tutor: TutorClient = Depends(get_tutor)) -> dict:
    language = tutor.language
    tutor.logout()
    return {"message": message("logged_out", language)}


@router.get("/session")
async def current_session(
    session: Session = Depends(require_session),
    tutor: TutorClient = Depends(get_tutor),
) -> dict:
    return _session_payload(session, tutor, "welcome")


@router.post("/language")
async def change_language(
    body: LanguageRequest, tutor: TutorClient = Depends(get_tutor)
) -> dict:
    """Set or toggle the language; works logged in or out."""
    if body.language is None:
        language = tutor.toggle_language()
    else:
        language = tutor.set_language(body.language)
    return {"language": language.value}


@router.post("/upgrade")
async def upgrade(
    session: Session = Depends(require_session),
    tutor: TutorClient = Depends(get_tutor),
) -> dict:
    profile = tutor.upgrade()
    return {"profile": profile.model_dump(mode="json")}


@router.post("/questions")
async def ask_question(
    body: QuestionRequest,
    session: Session = Depends(require_session),
    tutor: TutorClient = Depends(get_tutor),
) -> dict:
    result = await tutor.ask(body.question, body.subject, image=body.image)
    language = tutor.language
    return {
        "record": result.record.model_dump(mode="json"),
        "profile": result.profile.model_dump(mode="json"),
        "new_badges": result.new_badges,
        "badge_messages": [
            message("new_badge", language, name=get_badge(badge_id).name)
            for badge_id in result.new_badges
        ],
        "used_fallback": result.used_fallback,
        "remaining_questions": remaining_questions(result.profile, tutor.daily_limit),
        "message": message("explanation_ready", language),
    }


@router.get("/questions")
async def question_history(
    session: Session = Depends(require_session),
    tutor: TutorClient = Depends(get_tutor),
) -> list[dict]:
    """Question history, most recent first."""
    return [record.model_dump(mode="json") for record in tutor.history()]


@router.get("/badges")
async def badges(
    session: Session = Depends(require_session),
    tutor: TutorClient = Depends(get_tutor),
) -> list[dict]:
    return tutor.badges()
