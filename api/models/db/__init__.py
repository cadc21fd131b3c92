"""Database models."""
from api.models.db.question import QuestionRecord
from api.models.db.submission import Submission, SubmissionAnswer, SubmissionStatus

__all__ = [
    "QuestionRecord",
    "Submission",
    "SubmissionAnswer",
    "SubmissionStatus",
]
