"""Pydantic models."""
from api.models.questions import QuestionCreate, QuestionCreateResponse
from api.models.submissions import (
    AnswerPayload,
    NotesUpdate,
    PersonalInfoPayload,
    ScorePayload,
    ScoreResponse,
    SubmissionCreate,
)

__all__ = [
    "AnswerPayload",
    "NotesUpdate",
    "PersonalInfoPayload",
    "QuestionCreate",
    "QuestionCreateResponse",
    "ScorePayload",
    "ScoreResponse",
    "SubmissionCreate",
]
