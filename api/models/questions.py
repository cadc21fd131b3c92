"""Question-related Pydantic models."""
from pydantic import BaseModel, Field


class QuestionCreate(BaseModel):
    """Model for adding a question to the bank."""

    type: str = Field(..., min_length=1)
    content: str = ""
    text: str | None = None
    options: list[str] | dict[str, list[str]] | None = None
    correctAnswers: list[str] | None = None
    difficulty: str | None = None
    taskNumber: str | None = None
    audio: dict[str, str] | None = None
    isHidden: bool = False


class QuestionCreateResponse(BaseModel):
    """Model for question creation response."""

    message: str
    id: str
