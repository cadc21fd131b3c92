"""
Submission and SubmissionAnswer database models for completed placement tests.
"""

from __future__ import annotations

import enum
import json
import uuid
from datetime import datetime, timezone
from typing import Any

import sqlalchemy as sa
from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from api.database import Base


class SubmissionStatus(str, enum.Enum):
    """Status of a submission."""

    COMPLETED = "completed"


class Submission(Base):
    """
    One completed test attempt.
    Personal info is stored inline; answers live in ``submission_answers``.
    """

    __tablename__ = "submissions"

    id: Mapped[str] = mapped_column(
        String(64), primary_key=True, index=True, default=lambda: uuid.uuid4().hex
    )

    # Personal info
    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(200), index=True, nullable=False)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)
    target: Mapped[int] = mapped_column(nullable=False)

    # Review
    notes: Mapped[str] = mapped_column(Text, default="", nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=SubmissionStatus.COMPLETED.value, nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True,
    )

    # Relationships
    answers: Mapped[list["SubmissionAnswer"]] = relationship(
        "SubmissionAnswer",
        back_populates="submission",
        cascade="all, delete-orphan",
        order_by="SubmissionAnswer.question_number",
    )


class SubmissionAnswer(Base):
    """
    Answer to one question of a submission.
    Keeps its own copy of the question's grading inputs so scores can be
    recomputed even if the question bank changes later.
    """

    __tablename__ = "submission_answers"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    submission_id: Mapped[str] = mapped_column(
        ForeignKey("submissions.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Question reference
    question_number: Mapped[int] = mapped_column(nullable=False)
    question_id: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    question_type: Mapped[str] = mapped_column(String(20), nullable=False, default="")

    # Answer data
    answer: Mapped[str] = mapped_column(Text, nullable=False, default="")
    timer: Mapped[int] = mapped_column(default=0, nullable=False)

    # Question snapshot
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    text: Mapped[str] = mapped_column(Text, nullable=False, default="")
    options_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    all_options_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    correct_answers_json: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    # Constraints
    __table_args__ = (
        UniqueConstraint(
            "submission_id", "question_number", name="uq_submission_question"
        ),
    )

    # Relationships
    submission: Mapped["Submission"] = relationship(
        "Submission", back_populates="answers"
    )

    @property
    def options(self) -> list[str] | dict[str, list[str]]:
        """Parse options from JSON."""
        if not self.options_json:
            return []
        try:
            return json.loads(self.options_json)
        except (json.JSONDecodeError, TypeError):
            return []

    @options.setter
    def options(self, value: Any) -> None:
        """Serialize options to JSON."""
        self.options_json = json.dumps(value, ensure_ascii=False) if value else None

    @property
    def all_options(self) -> list[str]:
        """Parse flattened options from JSON."""
        if not self.all_options_json:
            return []
        try:
            return json.loads(self.all_options_json)
        except (json.JSONDecodeError, TypeError):
            return []

    @all_options.setter
    def all_options(self, value: list[str] | None) -> None:
        """Serialize flattened options to JSON."""
        self.all_options_json = (
            json.dumps(value, ensure_ascii=False) if value else None
        )

    @property
    def correct_answers(self) -> list[str]:
        """Parse correct answers from JSON."""
        if not self.correct_answers_json:
            return []
        try:
            return json.loads(self.correct_answers_json)
        except (json.JSONDecodeError, TypeError):
            return []

    @correct_answers.setter
    def correct_answers(self, value: list[str] | None) -> None:
        """Serialize correct answers to JSON."""
        self.correct_answers_json = (
            json.dumps(value, ensure_ascii=False) if value else None
        )
