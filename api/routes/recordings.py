"""Read Aloud recording endpoints."""
import logging

from fastapi import APIRouter, File, Form, HTTPException, UploadFile
from fastapi.responses import FileResponse

from api.config import RECORDINGS_DIR
from api.utils import recording_reference, recording_url, safe_asset_path, save_recording
from scoring import CATEGORY_RANGES, CATEGORY_READ_ALOUD

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/recordings", tags=["recordings"])


@router.post("")
def upload_recording(
    questionNumber: int = Form(...),
    file: UploadFile = File(...),
) -> dict[str, object]:
    """Upload the recording of a Read Aloud answer."""
    if questionNumber not in CATEGORY_RANGES[CATEGORY_READ_ALOUD]:
        raise HTTPException(
            status_code=400, detail="Recordings belong to Read Aloud questions only"
        )

    saved_path = save_recording(file, RECORDINGS_DIR, questionNumber)
    reference = recording_reference(saved_path)
    logger.info("Saved recording %s for question %d", saved_path.name, questionNumber)

    return {
        "reference": reference,
        "url": recording_url(reference),
        "name": saved_path.name,
        "questionNumber": questionNumber,
    }


@router.get("/{recording_path:path}")
def get_recording(recording_path: str) -> FileResponse:
    """Stream a stored recording."""
    file_path = safe_asset_path(RECORDINGS_DIR, recording_path)

    if not file_path.exists() or not file_path.is_file():
        raise HTTPException(status_code=404, detail="Recording not found")

    return FileResponse(file_path)
