"""Path utilities for stored recordings."""
from pathlib import Path

RECORDING_REFERENCE_PREFIX = "recordings/"


def recording_reference(path: Path) -> str:
    """Storage reference saved as the answer of a Read Aloud question."""
    return f"{RECORDING_REFERENCE_PREFIX}{path.name}"


def recording_url(reference: str) -> str | None:
    """URL of a recording reference, or None if it is not one."""
    if not reference.startswith(RECORDING_REFERENCE_PREFIX):
        return None
    return f"/api/{reference}"
