"""Manual notification endpoints for the latest submission."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session as DbSession

from api.database import get_db
from api.dependencies.auth import require_reviewer
from api.services import notification_service, submission_service
from api.services.notification_service import NotificationError

router = APIRouter(
    prefix="/api/notifications",
    tags=["notifications"],
    dependencies=[Depends(require_reviewer)],
)


def _latest(db: DbSession):
    submission = submission_service.latest_submission(db)
    if submission is None:
        raise HTTPException(status_code=404, detail="No submission found")
    return submission


@router.post("/discord")
def send_discord(db: Annotated[DbSession, Depends(get_db)]) -> dict[str, str]:
    """Post the latest submission to Discord."""
    submission = _latest(db)
    try:
        notification_service.send_discord(submission)
    except NotificationError as exc:
        raise HTTPException(status_code=500, detail=str(exc))
    return {"message": "Discord notification sent successfully"}


@router.post("/email")
def send_email(db: Annotated[DbSession, Depends(get_db)]) -> dict[str, str]:
    """Email the admins about the latest submission."""
    submission = _latest(db)
    try:
        notification_service.send_email(submission)
    except NotificationError as exc:
        raise HTTPException(status_code=500, detail=str(exc))
    return {"message": "Email sent successfully"}
