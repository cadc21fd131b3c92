"""Submission endpoints: candidate submit plus the review dashboard."""
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session as DbSession

from api.config import SUBMISSIONS_PER_PAGE
from api.database import get_db
from api.dependencies.auth import require_reviewer
from api.models import NotesUpdate, ScoreResponse, SubmissionCreate
from api.services import notification_service, submission_service
from api.utils import validate_id

router = APIRouter(prefix="/api/submissions", tags=["submissions"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_submission(
    payload: SubmissionCreate,
    background_tasks: BackgroundTasks,
    db: Annotated[DbSession, Depends(get_db)],
) -> dict[str, object]:
    """Submit a completed placement test."""
    submission = submission_service.create_submission(db, payload)
    if notification_service.notifications_enabled():
        background_tasks.add_task(
            notification_service.notify_new_submission, submission.id
        )
    return {
        "status": "submitted",
        "id": submission.id,
        "answerCount": len(submission.answers),
    }


@router.get("", dependencies=[Depends(require_reviewer)])
def list_submissions(
    db: Annotated[DbSession, Depends(get_db)],
    offset: int = Query(0, ge=0),
    limit: int = Query(SUBMISSIONS_PER_PAGE, ge=1, le=200),
    search: str | None = None,
) -> dict[str, object]:
    """List submissions newest first, one page at a time."""
    submissions = submission_service.list_submissions(db, limit, offset, search)
    total = submission_service.count_submissions(db, search)
    return {
        "submissions": [
            submission_service.submission_summary(item) for item in submissions
        ],
        "total": total,
        "hasMore": offset + len(submissions) < total,
    }


@router.get("/{submission_id}", dependencies=[Depends(require_reviewer)])
def get_submission(
    submission_id: str,
    db: Annotated[DbSession, Depends(get_db)],
) -> dict[str, object]:
    """Get a submission with answers and scores."""
    submission_id = validate_id("submissionId", submission_id)
    submission = submission_service.require_submission(db, submission_id)
    return submission_service.submission_detail(submission)


@router.get(
    "/{submission_id}/score",
    response_model=ScoreResponse,
    dependencies=[Depends(require_reviewer)],
)
def get_submission_score(
    submission_id: str,
    db: Annotated[DbSession, Depends(get_db)],
) -> dict[str, object]:
    """Score a submission by category."""
    submission_id = validate_id("submissionId", submission_id)
    submission = submission_service.require_submission(db, submission_id)
    return submission_service.score_payload(submission)


@router.patch("/{submission_id}/notes", dependencies=[Depends(require_reviewer)])
def update_notes(
    submission_id: str,
    update: NotesUpdate,
    db: Annotated[DbSession, Depends(get_db)],
) -> dict[str, object]:
    """Replace reviewer notes."""
    submission_id = validate_id("submissionId", submission_id)
    submission = submission_service.update_notes(db, submission_id, update.notes)
    return submission_service.submission_summary(submission)


@router.delete("/{submission_id}", dependencies=[Depends(require_reviewer)])
def delete_submission(
    submission_id: str,
    db: Annotated[DbSession, Depends(get_db)],
) -> dict[str, str]:
    """Delete a submission and its answers."""
    submission_id = validate_id("submissionId", submission_id)
    if not submission_service.delete_submission(db, submission_id):
        raise HTTPException(status_code=404, detail="Submission not found")
    return {"status": "deleted"}
