"""
Question bank database model.
"""

from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone
from typing import Any

import sqlalchemy as sa
from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from api.database import Base


class QuestionRecord(Base):
    """
    A question in the bank.
    Options, correct answers and audio sources are stored as JSON text.
    """

    __tablename__ = "questions"

    id: Mapped[str] = mapped_column(
        String(64), primary_key=True, default=lambda: uuid.uuid4().hex
    )
    type: Mapped[str] = mapped_column(String(20), index=True, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")

    difficulty: Mapped[str | None] = mapped_column(String(20), nullable=True)
    task_number: Mapped[str | None] = mapped_column(String(50), nullable=True)

    options_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    correct_answers_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    audio_json: Mapped[str | None] = mapped_column(Text, nullable=True)

    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)
    is_hidden: Mapped[bool] = mapped_column(default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True,
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
    def options(self, value: list[str] | dict[str, list[str]] | None) -> None:
        """Serialize options to JSON."""
        self.options_json = json.dumps(value, ensure_ascii=False) if value else None

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

    @property
    def audio(self) -> dict[str, Any]:
        """Parse audio sources from JSON."""
        if not self.audio_json:
            return {}
        try:
            return json.loads(self.audio_json)
        except (json.JSONDecodeError, TypeError):
            return {}

    @audio.setter
    def audio(self, value: dict[str, Any] | None) -> None:
        """Serialize audio sources to JSON."""
        self.audio_json = json.dumps(value, ensure_ascii=False) if value else None
