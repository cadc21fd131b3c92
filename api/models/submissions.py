"""Submission-related Pydantic models."""
from pydantic import BaseModel, Field


class PersonalInfoPayload(BaseModel):
    """Candidate details collected before the test starts."""

    fullName: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    phone: str = Field(..., min_length=1)
    target: int | str


class AnswerPayload(BaseModel):
    """Answer to one question of the test paper.

    Grading inputs always come from the question bank, so any question
    snapshot the client sends along is ignored.
    """

    questionId: str = ""
    questionType: str = ""
    answer: str | None = None
    timer: int = 0


class SubmissionCreate(BaseModel):
    """Model for submitting a completed test."""

    personalInfo: PersonalInfoPayload
    answers: dict[str, AnswerPayload] = Field(default_factory=dict)


class NotesUpdate(BaseModel):
    """Model for replacing reviewer notes."""

    notes: str


class ScorePayload(BaseModel):
    """One ``correct/total`` pair."""

    correct: int
    total: int
    display: str
    percent: float


class ScoreResponse(BaseModel):
    """Category and grand-total scores of a submission."""

    submissionId: str
    rwfib: ScorePayload
    rfib: ScorePayload
    wfd: ScorePayload
    total: ScorePayload
