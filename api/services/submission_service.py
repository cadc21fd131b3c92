"""Service layer for placement test submissions."""
import logging
from typing import Any

from fastapi import HTTPException
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session as DBSession, selectinload

import models
from api.models import SubmissionCreate
from api.models.db.question import QuestionRecord
from api.models.db.submission import Submission, SubmissionAnswer, SubmissionStatus
from api.utils import recording_url, to_utc_datetime
from scoring import category_for, score_submission
from serialization import (
    answer_review,
    answer_to_payload,
    personal_info_from_payload,
    personal_info_to_payload,
    score_report_to_payload,
)

logger = logging.getLogger(__name__)


def _snapshot_mismatch(question_type: str, content: str, correct_answers: list[str]) -> bool:
    """True when a fill-in-the-blank snapshot has one answer too many or too few."""
    if question_type not in (models.QUESTION_TYPE_RWFIB, models.QUESTION_TYPE_RFIB):
        return False
    return bool(correct_answers) and len(correct_answers) != models.count_blanks(content)


def _bank_snapshot(db: DBSession, question_id: str) -> dict[str, Any] | None:
    """Grading inputs of a bank question, captured at submission time."""
    if not question_id:
        return None
    record = db.get(QuestionRecord, question_id)
    if record is None:
        return None
    options = record.options
    all_options = (
        [option for group in options.values() for option in group]
        if isinstance(options, dict)
        else list(options)
    )
    return {
        "questionType": record.type,
        "content": record.content,
        "text": record.content,
        "options": options,
        "allOptions": all_options,
        "correctAnswers": record.correct_answers,
    }


def _answer_number(key: str) -> int:
    """Question number of an answer key; only plain ``1``..``12`` are accepted."""
    cleaned = str(key).strip()
    if cleaned.isascii() and cleaned.isdigit() and str(int(cleaned)) == cleaned:
        number = int(cleaned)
        if category_for(number) is not None:
            return number
    raise HTTPException(status_code=400, detail=f"Invalid question number: {key}")


def create_submission(db: DBSession, payload: SubmissionCreate) -> Submission:
    """
    Store a completed test.
    Empty answers are dropped. Grading inputs of each kept answer are copied
    from the question bank; answers to questions missing from the bank are
    kept for review with no grading inputs.
    """
    try:
        info = personal_info_from_payload(payload.personalInfo.model_dump())
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    if not (info.full_name and info.email and info.phone):
        raise HTTPException(
            status_code=400, detail="Please fill in all personal information fields"
        )

    submission = Submission(
        full_name=info.full_name,
        email=info.email,
        phone=info.phone,
        target=info.target,
        status=SubmissionStatus.COMPLETED.value,
    )

    seen: set[int] = set()
    for key, answer_payload in payload.answers.items():
        question_number = _answer_number(key)
        if question_number in seen:
            raise HTTPException(
                status_code=400, detail=f"Duplicate answer for question {question_number}"
            )
        seen.add(question_number)
        if not answer_payload.answer:
            continue

        snapshot = _bank_snapshot(db, answer_payload.questionId)
        if snapshot is None:
            logger.warning(
                "Answer %s refers to unknown question %r; stored without grading inputs",
                question_number,
                answer_payload.questionId,
            )
            snapshot = {
                "questionType": answer_payload.questionType,
                "content": "",
                "text": "",
                "options": None,
                "allOptions": None,
                "correctAnswers": [],
            }
        question_type = snapshot["questionType"]
        content = snapshot["content"]
        correct_answers = snapshot["correctAnswers"]
        if _snapshot_mismatch(question_type, content, correct_answers):
            # Stored anyway so the candidate's work is not lost
            logger.warning(
                "Answer %s has %d correct answers for %d blanks",
                question_number,
                len(correct_answers),
                models.count_blanks(content),
            )

        answer = SubmissionAnswer(
            question_number=question_number,
            question_id=answer_payload.questionId,
            question_type=question_type,
            answer=answer_payload.answer,
            timer=answer_payload.timer,
            content=content,
            text=snapshot["text"],
        )
        answer.options = snapshot["options"]
        answer.all_options = snapshot["allOptions"]
        answer.correct_answers = correct_answers
        submission.answers.append(answer)

    db.add(submission)
    db.commit()
    db.refresh(submission)
    logger.info(
        "Stored submission %s (%d answers) for %s",
        submission.id,
        len(submission.answers),
        submission.email,
    )
    return submission


def get_submission(db: DBSession, submission_id: str) -> Submission | None:
    """Get submission by ID with answers loaded."""
    return db.execute(
        select(Submission)
        .options(selectinload(Submission.answers))
        .where(Submission.id == submission_id)
    ).scalar_one_or_none()


def require_submission(db: DBSession, submission_id: str) -> Submission:
    submission = get_submission(db, submission_id)
    if submission is None:
        raise HTTPException(status_code=404, detail="Submission not found")
    return submission


def _search_filter(search: str | None):
    if not search or not search.strip():
        return None
    pattern = f"%{search.strip().lower()}%"
    return or_(
        func.lower(Submission.full_name).like(pattern),
        func.lower(Submission.email).like(pattern),
        func.lower(Submission.id).like(pattern),
        func.lower(Submission.notes).like(pattern),
    )


def list_submissions(
    db: DBSession,
    limit: int,
    offset: int = 0,
    search: str | None = None,
) -> list[Submission]:
    """
    Get submissions newest first, optionally filtered by a search term
    matching name, email, id or notes.
    """
    query = select(Submission)
    condition = _search_filter(search)
    if condition is not None:
        query = query.where(condition)

    query = (
        query.order_by(Submission.created_at.desc(), Submission.id.desc())
        .limit(limit)
        .offset(offset)
    )
    return list(db.execute(query).scalars().all())


def count_submissions(db: DBSession, search: str | None = None) -> int:
    """Count submissions matching the search term."""
    query = select(func.count(Submission.id))
    condition = _search_filter(search)
    if condition is not None:
        query = query.where(condition)
    return db.execute(query).scalar() or 0


def latest_submission(db: DBSession) -> Submission | None:
    return db.execute(
        select(Submission).order_by(Submission.created_at.desc()).limit(1)
    ).scalar_one_or_none()


def update_notes(db: DBSession, submission_id: str, notes: str) -> Submission:
    """Replace the reviewer notes of a submission."""
    submission = require_submission(db, submission_id)
    submission.notes = notes
    db.commit()
    db.refresh(submission)
    return submission


def delete_submission(db: DBSession, submission_id: str) -> bool:
    """Delete a submission and all its answers."""
    submission = db.get(Submission, submission_id)
    if not submission:
        return False

    db.delete(submission)
    db.commit()
    logger.info("Deleted submission %s", submission_id)
    return True


def answer_to_domain(answer: SubmissionAnswer) -> models.Answer:
    return models.Answer(
        question_number=answer.question_number,
        question_id=answer.question_id,
        question_type=answer.question_type,
        content=answer.content,
        answer=answer.answer,
        text=answer.text,
        timer=answer.timer,
        options=answer.options,
        all_options=answer.all_options,
        correct_answers=answer.correct_answers,
        created_at=to_utc_datetime(answer.created_at),
    )


def to_domain(submission: Submission) -> models.Submission:
    """Convert a stored submission to the domain model used for scoring."""
    return models.Submission(
        id=submission.id,
        personal_info=models.PersonalInfo(
            full_name=submission.full_name,
            email=submission.email,
            phone=submission.phone,
            target=submission.target,
        ),
        answers={
            str(answer.question_number): answer_to_domain(answer)
            for answer in submission.answers
        },
        notes=submission.notes,
        status=submission.status,
        created_at=to_utc_datetime(submission.created_at),
    )


def submission_summary(submission: Submission) -> dict[str, Any]:
    """List-view payload of a submission."""
    created_at = to_utc_datetime(submission.created_at)
    return {
        "id": submission.id,
        "personalInfo": personal_info_to_payload(
            models.PersonalInfo(
                full_name=submission.full_name,
                email=submission.email,
                phone=submission.phone,
                target=submission.target,
            )
        ),
        "notes": submission.notes,
        "status": submission.status,
        "timestamp": created_at.isoformat() if created_at else None,
    }


def score_payload(submission: Submission) -> dict[str, Any]:
    report = score_submission(to_domain(submission).answers)
    return {"submissionId": submission.id, **score_report_to_payload(report)}


def submission_detail(submission: Submission) -> dict[str, Any]:
    """Full payload of a submission with answers and scores."""
    domain = to_domain(submission)
    answers: dict[str, Any] = {}
    for key, answer in domain.answers.items():
        entry = answer_to_payload(answer)
        entry["recordingUrl"] = recording_url(answer.answer)
        entry["review"] = answer_review(answer.question_number, answer)
        answers[key] = entry

    return {
        **submission_summary(submission),
        "answers": answers,
        "scores": score_report_to_payload(score_submission(domain.answers)),
    }
