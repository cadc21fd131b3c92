"""Service layer for the question bank."""
import logging
import random
from typing import Any, Sequence

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session as DBSession

from api.models import QuestionCreate
from api.models.db.question import QuestionRecord
from models import (
    QUESTION_TYPE_READ_ALOUD,
    QUESTION_TYPE_RFIB,
    QUESTION_TYPE_RWFIB,
    QUESTION_TYPE_WFD,
    QUESTION_TYPES,
    NumberedQuestion,
    Question,
)
from scoring import CATEGORY_RANGES
from serialization import question_from_payload, validate_question

logger = logging.getLogger(__name__)

# Category order of a test paper; numbering follows CATEGORY_RANGES
PAPER_ORDER = (
    QUESTION_TYPE_READ_ALOUD,
    QUESTION_TYPE_RWFIB,
    QUESTION_TYPE_RFIB,
    QUESTION_TYPE_WFD,
)


def record_to_payload(record: QuestionRecord) -> dict[str, Any]:
    """Convert a stored question to its API payload."""
    payload: dict[str, Any] = {
        "id": record.id,
        "type": record.type,
        "content": record.content,
        "difficulty": record.difficulty,
        "taskNumber": record.task_number,
        "isActive": record.is_active,
        "isHidden": record.is_hidden,
        "createdAt": record.created_at.isoformat() if record.created_at else None,
    }
    if record.type in (QUESTION_TYPE_RWFIB, QUESTION_TYPE_RFIB):
        payload["options"] = record.options
        payload["correctAnswers"] = record.correct_answers
    if record.type == QUESTION_TYPE_WFD:
        payload["text"] = record.content
        payload["audio"] = record.audio
    return payload


def record_to_question(record: QuestionRecord) -> Question:
    return question_from_payload(record_to_payload(record))


def create_question(db: DBSession, payload: QuestionCreate) -> QuestionRecord:
    """
    Validate and store a new question.
    Fill-in-the-blank questions must have one correct answer per blank.
    """
    content = (payload.content or payload.text or "").strip()
    if not payload.type or not content:
        raise HTTPException(
            status_code=400,
            detail="Missing required fields: type and content are required",
        )
    if payload.type not in QUESTION_TYPES:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid question type. Must be one of: {', '.join(QUESTION_TYPES)}",
        )

    raw = payload.model_dump()
    raw["content"] = content
    question = question_from_payload(raw)
    problems = validate_question(question)
    if problems:
        raise HTTPException(status_code=400, detail="; ".join(problems))

    record = QuestionRecord(
        type=payload.type,
        content=content,
        difficulty=payload.difficulty,
        task_number=payload.taskNumber,
        is_hidden=payload.isHidden,
    )
    if payload.type in (QUESTION_TYPE_RWFIB, QUESTION_TYPE_RFIB):
        record.options = payload.options
        record.correct_answers = payload.correctAnswers
    if payload.type == QUESTION_TYPE_WFD:
        record.audio = payload.audio

    db.add(record)
    db.commit()
    db.refresh(record)
    logger.info("Added %s question %s", record.type, record.id)
    return record


def list_questions(db: DBSession) -> list[QuestionRecord]:
    """Get all questions, newest first."""
    return list(
        db.execute(
            select(QuestionRecord).order_by(QuestionRecord.created_at.desc())
        ).scalars().all()
    )


def delete_question(db: DBSession, question_id: str) -> bool:
    """Delete a question from the bank."""
    record = db.get(QuestionRecord, question_id)
    if not record:
        return False

    db.delete(record)
    db.commit()
    logger.info("Deleted question %s", question_id)
    return True


def select_test_questions(
    pool: Sequence[Question],
    per_type: int,
    rng: random.Random | None = None,
) -> list[NumberedQuestion]:
    """
    Pick ``per_type`` random questions of each type and number them.

    Read Aloud questions are numbered from 1, RWFIB from 4, RFIB from 7 and
    WFD from 10, regardless of how many questions each type actually has.
    """
    rng = rng or random.Random()
    paper: list[NumberedQuestion] = []
    for question_type in PAPER_ORDER:
        candidates = [q for q in pool if q.type == question_type]
        numbers = CATEGORY_RANGES[question_type]
        count = min(per_type, len(numbers), len(candidates))
        chosen = rng.sample(candidates, count)
        first_number = numbers.start
        for offset, question in enumerate(chosen):
            paper.append(NumberedQuestion(number=first_number + offset, question=question))
    return paper


def build_test_paper(
    db: DBSession,
    per_type: int,
    rng: random.Random | None = None,
) -> list[NumberedQuestion]:
    """Draw a test paper from active, visible questions."""
    records = db.execute(
        select(QuestionRecord).where(
            QuestionRecord.is_active.is_(True),
            QuestionRecord.is_hidden.is_(False),
        )
    ).scalars().all()

    pool: list[Question] = []
    for record in records:
        try:
            pool.append(record_to_question(record))
        except ValueError:
            logger.warning("Skipping question %s with type %r", record.id, record.type)
    return select_test_questions(pool, per_type, rng)
