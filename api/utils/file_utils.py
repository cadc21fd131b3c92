"""File handling utilities."""
import time
from pathlib import Path

from fastapi import HTTPException, UploadFile, status

from api.config import RECORDING_ALLOWED_EXTENSIONS, RECORDING_MAX_SIZE_BYTES


def safe_asset_path(base_dir: Path, asset_path: str) -> Path:
    """Resolve asset path safely (prevent path traversal)."""
    resolved = (base_dir / asset_path).resolve()
    if base_dir.resolve() not in resolved.parents and resolved != base_dir.resolve():
        raise HTTPException(status_code=400, detail="Invalid asset path")
    return resolved


def recording_filename(question_number: int, extension: str, timestamp_ms: int | None = None) -> str:
    """Build the stored name of a Read Aloud recording."""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"placement_test_ra_{question_number}_{timestamp_ms}{extension}"


def save_recording(upload: UploadFile, target_dir: Path, question_number: int) -> Path:
    """Validate and save an uploaded recording to target directory."""
    extension = Path(upload.filename or "").suffix.lower()
    if extension not in RECORDING_ALLOWED_EXTENSIONS:
        allowed = ", ".join(sorted(RECORDING_ALLOWED_EXTENSIONS))
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported recording type. Allowed: {allowed}",
        )

    data = upload.file.read()
    if not data:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Recording is empty"
        )
    if len(data) > RECORDING_MAX_SIZE_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="Recording is too large",
        )

    target_dir.mkdir(parents=True, exist_ok=True)
    candidate = target_dir / recording_filename(question_number, extension)
    while candidate.exists():
        candidate = target_dir / recording_filename(question_number, extension)
        time.sleep(0.001)
    candidate.write_bytes(data)
    return candidate
