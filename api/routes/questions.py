"""Question bank endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session as DbSession

from api.config import QUESTIONS_PER_TYPE, READ_ALOUD_PREP_SECONDS, READ_ALOUD_RECORD_SECONDS
from api.database import get_db
from api.dependencies.auth import require_reviewer
from api.models import QuestionCreate, QuestionCreateResponse
from api.services import question_service
from api.utils import validate_id
from serialization import category_numbers, question_to_payload

router = APIRouter(prefix="/api/questions", tags=["questions"])


@router.get("", dependencies=[Depends(require_reviewer)])
def list_questions(
    db: Annotated[DbSession, Depends(get_db)],
) -> dict[str, object]:
    """List all questions, newest first."""
    questions = [
        question_service.record_to_payload(record)
        for record in question_service.list_questions(db)
    ]
    return {"questions": questions, "total": len(questions)}


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=QuestionCreateResponse,
    dependencies=[Depends(require_reviewer)],
)
def add_question(
    payload: QuestionCreate,
    db: Annotated[DbSession, Depends(get_db)],
) -> dict[str, str]:
    """Add a question to the bank."""
    record = question_service.create_question(db, payload)
    return {"message": "Question added successfully", "id": record.id}


@router.get("/test")
def get_test_paper(
    db: Annotated[DbSession, Depends(get_db)],
) -> dict[str, object]:
    """Draw a numbered test paper for a new candidate."""
    paper = question_service.build_test_paper(db, QUESTIONS_PER_TYPE)
    # Candidates must not see the answers
    questions = []
    for numbered in paper:
        payload = question_to_payload(numbered.question, numbered.number)
        payload.pop("correctAnswers", None)
        questions.append(payload)
    return {
        "questions": questions,
        "categories": category_numbers(),
        "timers": {
            "readAloudPrepSeconds": READ_ALOUD_PREP_SECONDS,
            "readAloudRecordSeconds": READ_ALOUD_RECORD_SECONDS,
        },
    }


@router.delete("/{question_id}", dependencies=[Depends(require_reviewer)])
def delete_question(
    question_id: str,
    db: Annotated[DbSession, Depends(get_db)],
) -> dict[str, str]:
    """Delete a question from the bank."""
    question_id = validate_id("questionId", question_id)
    if not question_service.delete_question(db, question_id):
        raise HTTPException(status_code=404, detail="Question not found")
    return {"status": "deleted"}
